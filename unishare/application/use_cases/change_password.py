"""Change password from profile settings"""

from ...domain.exceptions import InvalidCredentialError, NotFoundError
from ...domain.value_objects.entity_ids import UserId
from ...domain.value_objects.password import ensure_strong_password
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher
from ...infrastructure.external_services.email_templates import password_changed_email
from ..dtos.user_dtos import ChangePasswordDto, MessageResponse
from ..result import as_result


class ChangePasswordUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, notifications: INotificationDispatcher):
        self.unit_of_work = unit_of_work
        self.notifications = notifications

    @as_result
    async def execute(self, user_id: UserId, request: ChangePasswordDto) -> MessageResponse:
        async with self.unit_of_work:
            users = self.unit_of_work.users
            user = await users.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")

            if not user.has_password:
                raise InvalidCredentialError("Cannot change password for Google OAuth accounts")
            if not user.check_password(request.current_password):
                raise InvalidCredentialError("Current password is incorrect")

            ensure_strong_password(request.new_password)
            user.set_password(request.new_password)
            await users.update(user)
            await self.unit_of_work.commit()

        self.notifications.submit(password_changed_email(str(user.email), user.full_name))
        return MessageResponse(message="Password changed successfully")
