"""Login user use case"""

import logging
from datetime import datetime
from typing import Callable, Optional

from ...domain.exceptions import AccountLockedError, InvalidCredentialError
from ...domain.value_objects.email import Email
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.login_attempt_guard import LoginAttemptGuard
from ...domain.services.notifications import INotificationDispatcher
from ...infrastructure.external_services.email_templates import (
    account_locked_email,
    login_notification_email,
)
from ..dtos.user_dtos import LoginUserDto, UserResponse
from ..result import as_result

logger = logging.getLogger(__name__)


class LoginUserUseCase:

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
    async def execute(self, request: LoginUserDto, client_ip: Optional[str] = None) -> UserResponse:
        now = self.clock()

        async with self.unit_of_work:
            users = self.unit_of_work.users
            guard = LoginAttemptGuard(users)

            user = await users.get_by_email(Email(request.email))
            if not user:
                raise InvalidCredentialError("Invalid email or password")

            # Locked accounts are refused before the password is looked at
            guard.ensure_not_locked(user, now)

            if not user.has_password:
                raise InvalidCredentialError(
                    "This account uses Google Sign-In. Please continue with Google."
                )

            if not user.check_password(request.password):
                outcome = await guard.record_failure(user, now)
                await self.unit_of_work.commit()

                if outcome.just_locked:
                    self.notifications.submit(
                        account_locked_email(str(user.email), user.full_name, outcome.lock_until)
                    )
                if outcome.locked:
                    raise AccountLockedError(
                        "Too many failed login attempts. Account locked for 2 hours.",
                        lock_until=outcome.lock_until,
                        remaining_attempts=0,
                    )
                raise InvalidCredentialError(
                    f"Invalid email or password. {outcome.remaining_attempts} attempt(s) remaining.",
                    remaining_attempts=outcome.remaining_attempts,
                )

            await guard.record_success(user)
            user.record_login(now)
            await users.update(user)
            await self.unit_of_work.commit()

        logger.info(f"User {user.id} logged in")
        self.notifications.submit(
            login_notification_email(str(user.email), user.full_name, now, client_ip)
        )

        return UserResponse.for_user(user)
