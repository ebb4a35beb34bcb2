"""User repository interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, List

from ..entities.user import User
from ..enums import UserRole
from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId


@dataclass(frozen=True)
class LoginAttemptState:
    """Security counters as they stand after an atomic update"""
    login_attempts: int
    lock_until: Optional[datetime]
    just_locked: bool = False


class IUserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: Email) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_verification_token(self, token: str, now: datetime) -> Optional[User]:
        """Account holding this unexpired verification token"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(self, token_hash: str, now: datetime) -> Optional[User]:
        """Account holding this unexpired password reset hash"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: Email) -> bool:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist profile, credential and token fields. Security counters are
        left alone; they change only through the atomic helpers below."""
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        pass

    @abstractmethod
    async def list_by_role(self, role: UserRole) -> List[User]:
        pass

    # Atomic conditional updates

    @abstractmethod
    async def register_failed_login(
        self,
        user_id: UserId,
        now: datetime,
        max_attempts: int,
        lock_duration: timedelta
    ) -> LoginAttemptState:
        """Count a failed login at the storage layer and lock once the
        threshold is reached. A lock that has already run out restarts the
        count at 1."""
        pass

    @abstractmethod
    async def reset_login_attempts(self, user_id: UserId) -> None:
        pass

    @abstractmethod
    async def claim_verification_resend(
        self,
        user_id: UserId,
        now: datetime,
        cooldown: timedelta,
        window: timedelta,
        daily_cap: int
    ) -> Optional[int]:
        """Take one resend slot if cap and cooldown allow it; returns the new
        count, or None when the slot could not be taken."""
        pass

    @abstractmethod
    async def consume_verification_token(self, user_id: UserId, token: str, now: datetime) -> bool:
        """Mark verified and clear the token, only if it is still the current
        unexpired one."""
        pass

    @abstractmethod
    async def consume_password_reset(
        self,
        user_id: UserId,
        token_hash: str,
        new_hashed_password: str,
        now: datetime
    ) -> bool:
        """Set the new password, clear reset and lock state, only if the
        reset hash is still current and unexpired."""
        pass

    @abstractmethod
    async def touch_last_active(self, user_id: UserId, now: datetime) -> None:
        pass

    @abstractmethod
    async def touch_chat_visit(self, user_id: UserId, now: datetime) -> None:
        pass
