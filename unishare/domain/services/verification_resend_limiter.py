"""Rate limiting for verification email resends"""

import math
from datetime import datetime, timedelta

from ..entities.user import User
from ..exceptions import InvalidStateError, RateLimitedError
from ..repositories.user_repository import IUserRepository

DAILY_RESEND_CAP = 5
RESEND_WINDOW = timedelta(hours=24)
RESEND_COOLDOWN = timedelta(minutes=2)


class VerificationResendLimiter:
    """At most ``daily_cap`` resends per window, spaced by ``cooldown``.

    The window restarts once the latest send is older than ``window``; it is
    anchored on that send rather than sliding.
    """

    def __init__(
        self,
        users: IUserRepository,
        daily_cap: int = DAILY_RESEND_CAP,
        window: timedelta = RESEND_WINDOW,
        cooldown: timedelta = RESEND_COOLDOWN
    ):
        self.users = users
        self.daily_cap = daily_cap
        self.window = window
        self.cooldown = cooldown

    def _window_expired(self, user: User, now: datetime) -> bool:
        last = user.last_verification_resend
        return last is None or now - last > self.window

    def check(self, user: User, now: datetime) -> None:
        """Raise if a resend would be refused right now"""
        if user.is_verified:
            raise InvalidStateError("Email is already verified")

        if self._window_expired(user, now):
            return

        last = user.last_verification_resend
        if user.verification_resend_count >= self.daily_cap:
            retry_after = last + self.window
            raise RateLimitedError(
                "Daily resend limit reached. Please try again tomorrow.",
                retry_after=retry_after,
                wait_seconds=math.ceil((retry_after - now).total_seconds()),
            )

        next_allowed = last + self.cooldown
        if now < next_allowed:
            wait_seconds = math.ceil((next_allowed - now).total_seconds())
            raise RateLimitedError(
                f"Please wait {wait_seconds} seconds before requesting another verification email",
                retry_after=next_allowed,
                wait_seconds=wait_seconds,
            )

    async def claim(self, user: User, now: datetime) -> int:
        """Check, then take a slot atomically. Returns the resends left in the window."""
        self.check(user, now)

        count = await self.users.claim_verification_resend(
            user.id, now, self.cooldown, self.window, self.daily_cap
        )
        if count is None:
            # A concurrent request took the slot between our read and the update
            raise RateLimitedError(
                "Please wait before requesting another verification email",
                retry_after=now + self.cooldown,
                wait_seconds=math.ceil(self.cooldown.total_seconds()),
            )

        user.verification_resend_count = count
        user.last_verification_resend = now
        return max(self.daily_cap - count, 0)
