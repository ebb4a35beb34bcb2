"""Reset password use case"""

import logging
from datetime import datetime
from typing import Callable

from ...core.security import get_password_hash, hash_token
from ..dtos.user_dtos import ResetPasswordDto, MessageResponse
from ..result import as_result
from ...domain.exceptions import TokenInvalidOrExpiredError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher
from ...domain.value_objects.password import ensure_strong_password
from ...infrastructure.external_services.email_templates import password_changed_email

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """Use case for resetting password with token"""

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notifications: INotificationDispatcher,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.unit_of_work = unit_of_work
        self.notifications = notifications
        self.clock = clock

    @as_result
    async def execute(self, request: ResetPasswordDto) -> MessageResponse:
        ensure_strong_password(request.password)
        now = self.clock()
        token_hash = hash_token(request.token)

        async with self.unit_of_work:
            user_repo = self.unit_of_work.users
            user = await user_repo.get_by_reset_token_hash(token_hash, now)
            if not user:
                raise TokenInvalidOrExpiredError("Invalid or expired reset token")

            # Also clears any lockout: a completed reset proves identity
            consumed = await user_repo.consume_password_reset(
                user.id, token_hash, get_password_hash(request.password), now
            )
            if not consumed:
                raise TokenInvalidOrExpiredError("Invalid or expired reset token")

            await self.unit_of_work.commit()

        logger.info(f"Password reset completed for user {user.id}")
        self.notifications.submit(password_changed_email(str(user.email), user.full_name))

        return MessageResponse(message="Password reset successful! You can now log in with your new password.")
