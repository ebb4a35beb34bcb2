"""Update user profile use case"""

from ...domain.exceptions import AlreadyExistsError, InvalidInputError, NotFoundError
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import UserId
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import UpdateProfileDto, UserDto
from ..result import as_result


class UpdateUserProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, user_id: UserId, request: UpdateProfileDto) -> UserDto:
        """Update user profile; a new email address must be verified again"""
        async with self.unit_of_work:
            users = self.unit_of_work.users
            user = await users.get_by_id(user_id)

            if not user:
                raise NotFoundError("User not found")

            if request.full_name is not None:
                full_name = request.full_name.strip()
                if len(full_name) < 2:
                    raise InvalidInputError("Name must be at least 2 characters", field="full_name")
                user.full_name = full_name

            if request.email is not None:
                new_email = Email(request.email)
                if new_email != user.email:
                    if await users.exists_by_email(new_email):
                        raise AlreadyExistsError("Email already in use", field="email")
                    user.change_email(new_email)

            await users.update(user)
            await self.unit_of_work.commit()

            return UserDto.from_entity(user)
