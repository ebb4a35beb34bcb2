"""Exchange a refresh token for a new access token"""

from ...core.security import create_access_token, verify_refresh_token
from ...domain.exceptions import InvalidCredentialError, InvalidInputError
from ...domain.value_objects.entity_ids import UserId
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import RefreshTokenDto, AccessTokenDto
from ..result import as_result


class RefreshTokenUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, request: RefreshTokenDto) -> AccessTokenDto:
        subject = verify_refresh_token(request.refresh_token)
        if not subject:
            raise InvalidCredentialError("Invalid refresh token")

        try:
            user_id = UserId.from_str(subject)
        except InvalidInputError:
            raise InvalidCredentialError("Invalid refresh token")

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(user_id)
            if not user:
                raise InvalidCredentialError("Invalid refresh token")

        return AccessTokenDto(access_token=create_access_token(str(user.id)))
