"""Login attempt guard: failed-login counting and time-based lockout"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..entities.user import User
from ..exceptions import AccountLockedError
from ..repositories.user_repository import IUserRepository

logger = logging.getLogger(__name__)

MAX_LOGIN_ATTEMPTS = 5
LOCK_TIME = timedelta(hours=2)


@dataclass(frozen=True)
class FailedLoginOutcome:
    attempts: int
    remaining_attempts: int
    lock_until: Optional[datetime]
    just_locked: bool

    @property
    def locked(self) -> bool:
        return self.lock_until is not None


class LoginAttemptGuard:
    """Unlocked -> Accumulating(n) -> Locked(until) -> Unlocked.

    The counters live in the store and are only moved through the
    repository's atomic helpers, so concurrent failures are all counted.
    """

    def __init__(
        self,
        users: IUserRepository,
        max_attempts: int = MAX_LOGIN_ATTEMPTS,
        lock_time: timedelta = LOCK_TIME
    ):
        self.users = users
        self.max_attempts = max_attempts
        self.lock_time = lock_time

    def ensure_not_locked(self, user: User, now: datetime) -> None:
        """Refuse the attempt outright while a lock is active"""
        if user.is_locked_at(now):
            raise AccountLockedError(
                "Account is temporarily locked due to too many failed login attempts",
                lock_until=user.lock_until,
            )

    async def record_failure(self, user: User, now: datetime) -> FailedLoginOutcome:
        state = await self.users.register_failed_login(
            user.id, now, self.max_attempts, self.lock_time
        )
        user.login_attempts = state.login_attempts
        user.lock_until = state.lock_until

        locked = state.lock_until is not None and state.lock_until > now
        remaining = 0 if locked else max(self.max_attempts - state.login_attempts, 0)
        if state.just_locked:
            logger.warning(f"Account {user.id} locked until {state.lock_until.isoformat()}")

        return FailedLoginOutcome(
            attempts=state.login_attempts,
            remaining_attempts=remaining,
            lock_until=state.lock_until if locked else None,
            just_locked=state.just_locked,
        )

    async def record_success(self, user: User) -> None:
        if user.login_attempts > 0 or user.lock_until is not None:
            await self.users.reset_login_attempts(user.id)
            user.login_attempts = 0
            user.lock_until = None
