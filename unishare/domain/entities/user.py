"""User entity with account business logic"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId
from ..value_objects.password import ensure_strong_password
from ..value_objects.tokens import IssuedToken
from ..enums import UserRole, AuthProvider
from ..exceptions import InvalidInputError
from ...core.security import (
    get_password_hash,
    verify_password,
    generate_secure_token,
    hash_token,
)

VERIFICATION_TOKEN_TTL = timedelta(hours=24)
PASSWORD_RESET_TOKEN_TTL = timedelta(hours=1)


@dataclass
class User:
    id: UserId
    email: Email
    full_name: str
    hashed_password: Optional[str] = None
    role: UserRole = UserRole.STUDENT
    auth_provider: AuthProvider = AuthProvider.LOCAL
    google_id: Optional[str] = None
    avatar: Optional[str] = None

    # Verification / reset state: absent means nothing pending
    is_verified: bool = False
    verification: Optional[IssuedToken] = None
    password_reset: Optional[IssuedToken] = None

    # Security counters; written through the repository's atomic helpers only
    login_attempts: int = 0
    lock_until: Optional[datetime] = None
    verification_resend_count: int = 0
    last_verification_resend: Optional[datetime] = None

    last_login: Optional[datetime] = None
    last_active: Optional[datetime] = None
    last_chat_visit: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if not self.hashed_password and not self.google_id:
            raise InvalidInputError("An account without a password must be linked to an external provider")

    @classmethod
    def create(cls, email: Email, full_name: str, password: str) -> 'User':
        """Factory method for a local (email + password) account"""
        full_name = (full_name or "").strip()
        if len(full_name) < 2:
            raise InvalidInputError("Name must be at least 2 characters", field="full_name")
        ensure_strong_password(password)

        return cls(
            id=UserId.generate(),
            email=email,
            full_name=full_name,
            hashed_password=get_password_hash(password),
            auth_provider=AuthProvider.LOCAL,
        )

    @classmethod
    def create_from_google(
        cls,
        email: Email,
        full_name: str,
        google_id: str,
        avatar: Optional[str] = None
    ) -> 'User':
        """Factory method for a first-time Google sign-in; Google has verified the email"""
        now = datetime.utcnow()
        return cls(
            id=UserId.generate(),
            email=email,
            full_name=full_name or "Google User",
            google_id=google_id,
            avatar=avatar,
            auth_provider=AuthProvider.GOOGLE,
            is_verified=True,
            last_login=now,
        )

    # Credentials

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)

    def set_password(self, raw_password: str) -> None:
        """Business logic: store a salted hash of a new password"""
        if raw_password == self.hashed_password:
            # Already the stored hash; rehashing would lock the user out
            return
        self.hashed_password = get_password_hash(raw_password)
        self.updated_at = datetime.utcnow()

    def check_password(self, raw_password: str) -> bool:
        """Compare against the stored hash. OAuth-only accounts never match."""
        return verify_password(raw_password, self.hashed_password)

    # Lockout

    def is_locked_at(self, now: datetime) -> bool:
        return self.lock_until is not None and self.lock_until > now

    @property
    def is_locked(self) -> bool:
        return self.is_locked_at(datetime.utcnow())

    # Tokens

    def issue_verification_token(self, now: Optional[datetime] = None) -> str:
        """Business logic: issue a fresh verification token, replacing any unused one"""
        now = now or datetime.utcnow()
        token = generate_secure_token()
        self.verification = IssuedToken(value=token, expires_at=now + VERIFICATION_TOKEN_TTL)
        self.updated_at = now
        return token

    def issue_password_reset_token(self, now: Optional[datetime] = None) -> str:
        """Business logic: issue a reset token; only its hash is kept on the account"""
        now = now or datetime.utcnow()
        token = generate_secure_token()
        self.password_reset = IssuedToken(value=hash_token(token), expires_at=now + PASSWORD_RESET_TOKEN_TTL)
        self.updated_at = now
        return token

    def mark_verified(self) -> None:
        self.is_verified = True
        self.verification = None
        self.verification_resend_count = 0
        self.last_verification_resend = None
        self.updated_at = datetime.utcnow()

    # Profile

    def change_email(self, new_email: Email) -> None:
        """Business logic: a changed address has to be verified again"""
        if new_email == self.email:
            return
        self.email = new_email
        self.is_verified = False
        self.updated_at = datetime.utcnow()

    def link_google(self, google_id: str, avatar: Optional[str] = None) -> None:
        """Business logic: attach a Google identity to an existing account"""
        if not self.google_id:
            self.google_id = google_id
        if not self.is_verified:
            self.is_verified = True
            self.verification = None
        if not self.has_password:
            self.auth_provider = AuthProvider.GOOGLE
        if not self.avatar and avatar:
            self.avatar = avatar
        self.updated_at = datetime.utcnow()

    def record_login(self, now: Optional[datetime] = None) -> None:
        """Record user login"""
        self.last_login = now or datetime.utcnow()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
