"""Forgot password use case"""

import logging
from datetime import datetime
from typing import Callable

from ..dtos.user_dtos import ForgotPasswordDto, MessageResponse
from ..result import as_result
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher
from ...domain.value_objects.email import Email
from ...infrastructure.external_services.email_templates import password_reset_email

logger = logging.getLogger(__name__)

GENERIC_RESPONSE = "If an account with that email exists, a password reset link has been sent."


class ForgotPasswordUseCase:
    """Use case for handling forgot password requests.

    The response never reveals whether the address belongs to an account.
    """

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
    async def execute(self, request: ForgotPasswordDto) -> MessageResponse:
        async with self.unit_of_work:
            user_repo = self.unit_of_work.users
            user = await user_repo.get_by_email(Email(request.email))

            if not user or not user.has_password:
                return MessageResponse(message=GENERIC_RESPONSE)

            # Only the hash is stored; the raw token goes out by email
            reset_token = user.issue_password_reset_token(self.clock())
            await user_repo.update(user)
            await self.unit_of_work.commit()

        logger.info(f"Password reset requested for user {user.id}")
        self.notifications.submit(password_reset_email(str(user.email), user.full_name, reset_token))

        return MessageResponse(message=GENERIC_RESPONSE)
