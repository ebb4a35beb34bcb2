"""Email verification use cases: verify a token, resend the verification email"""

import logging
from datetime import datetime
from typing import Callable

from ...core.security import tokens_match
from ...domain.exceptions import NotFoundError, TokenInvalidOrExpiredError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher
from ...domain.services.verification_resend_limiter import VerificationResendLimiter
from ...domain.value_objects.entity_ids import UserId
from ...infrastructure.external_services.email_templates import verification_email, welcome_email
from ..dtos.user_dtos import VerifyEmailDto, MessageResponse, ResendVerificationResponse
from ..result import as_result

logger = logging.getLogger(__name__)


class EmailVerificationUseCase:

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
    async def execute(self, request: VerifyEmailDto) -> MessageResponse:
        """Verify user email with token.

        Unknown, already used and expired tokens all fail the same way.
        """
        now = self.clock()

        async with self.unit_of_work:
            users = self.unit_of_work.users
            user = await users.get_by_verification_token(request.token, now)

            if (
                user is None
                or user.verification is None
                or not tokens_match(request.token, user.verification.value)
            ):
                raise TokenInvalidOrExpiredError("Invalid or expired verification token")

            # Conditional on the token still being current, so it is consumed once
            if not await users.consume_verification_token(user.id, request.token, now):
                raise TokenInvalidOrExpiredError("Invalid or expired verification token")

            user.mark_verified()
            await self.unit_of_work.commit()

        logger.info(f"User {user.id} verified their email")
        self.notifications.submit(welcome_email(str(user.email), user.full_name))

        return MessageResponse(message="Email verified successfully! You can now log in.")


class ResendVerificationUseCase:

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
    async def execute(self, user_id: UserId) -> ResendVerificationResponse:
        now = self.clock()

        async with self.unit_of_work:
            users = self.unit_of_work.users
            user = await users.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")

            remaining = await VerificationResendLimiter(users).claim(user, now)

            # Replaces any unused token
            token = user.issue_verification_token(now)
            await users.update(user)
            await self.unit_of_work.commit()

        self.notifications.submit(verification_email(str(user.email), user.full_name, token))

        return ResendVerificationResponse(
            message="Verification email sent! Please check your inbox.",
            remaining_attempts=remaining
        )
