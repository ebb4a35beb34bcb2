"""Admin: list all accounts"""

from typing import List

from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import UserDto
from ..result import as_result


class ListUsersUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self) -> List[UserDto]:
        async with self.unit_of_work:
            users = await self.unit_of_work.users.list_all()
            return [UserDto.from_entity(user) for user in users]
