"""User repository implementation

Security counters (failed logins, lock, resend tracking) are never written
from an in-memory copy. Each change is a conditional UPDATE evaluated by the
database, so concurrent requests for the same account cannot lose increments.
"""

from datetime import datetime, timedelta
from typing import Optional, List

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from ...domain.repositories.user_repository import IUserRepository, LoginAttemptState
from ...domain.entities.user import User
from ...domain.enums import UserRole, AuthProvider
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import UserId
from ...domain.value_objects.tokens import IssuedToken
from ..orm.user_model import UserModel


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, user_id: UserId) -> Optional[UserModel]:
        return self.session.query(UserModel).filter(UserModel.id == user_id.value).first()

    def _conditional_update(self, user_id: UserId, *criteria, **values) -> int:
        result = self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id.value, *criteria)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID"""
        model = self._get_model(user_id)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: Email) -> Optional[User]:
        """Get user by email"""
        model = self.session.query(UserModel).filter(UserModel.email == str(email)).first()
        return self._map_to_entity(model) if model else None

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        model = self.session.query(UserModel).filter(UserModel.google_id == google_id).first()
        return self._map_to_entity(model) if model else None

    async def get_by_verification_token(self, token: str, now: datetime) -> Optional[User]:
        """Get user by unexpired email verification token"""
        model = self.session.query(UserModel).filter(
            UserModel.verification_token == token,
            UserModel.verification_token_expires_at > now
        ).first()
        return self._map_to_entity(model) if model else None

    async def get_by_reset_token_hash(self, token_hash: str, now: datetime) -> Optional[User]:
        """Get user by unexpired password reset hash"""
        model = self.session.query(UserModel).filter(
            UserModel.password_reset_token_hash == token_hash,
            UserModel.password_reset_expires_at > now
        ).first()
        return self._map_to_entity(model) if model else None

    async def exists_by_email(self, email: Email) -> bool:
        """Check if user exists by email"""
        return self.session.query(UserModel.id).filter(UserModel.email == str(email)).first() is not None

    async def add(self, user: User) -> User:
        """Add a new user"""
        model = UserModel(
            id=user.id.value,
            login_attempts=user.login_attempts,
            lock_until=user.lock_until,
            verification_resend_count=user.verification_resend_count,
            last_verification_resend=user.last_verification_resend,
            last_active=user.last_active,
            last_chat_visit=user.last_chat_visit,
            created_at=user.created_at,
        )
        self._update_model_from_entity(model, user)
        self.session.add(model)
        self.session.flush()
        return user

    async def update(self, user: User) -> User:
        """Update an existing user's profile, credential and token fields"""
        existing = self._get_model(user.id)
        if existing:
            self._update_model_from_entity(existing, user)
            self.session.flush()
        return user

    async def list_all(self) -> List[User]:
        models = self.session.query(UserModel).order_by(UserModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def list_by_role(self, role: UserRole) -> List[User]:
        models = self.session.query(UserModel).filter(UserModel.role == role).all()
        return [self._map_to_entity(model) for model in models]

    async def register_failed_login(
        self,
        user_id: UserId,
        now: datetime,
        max_attempts: int,
        lock_duration: timedelta
    ) -> LoginAttemptState:
        # A lock that has already run out: restart the count at this failure
        restarted = self._conditional_update(
            user_id,
            UserModel.lock_until.is_not(None),
            UserModel.lock_until <= now,
            login_attempts=1,
            lock_until=None,
        )
        if not restarted:
            self._conditional_update(user_id, login_attempts=UserModel.login_attempts + 1)

        # Only the request that crosses the threshold sets the lock
        just_locked = self._conditional_update(
            user_id,
            UserModel.login_attempts >= max_attempts,
            or_(UserModel.lock_until.is_(None), UserModel.lock_until <= now),
            lock_until=now + lock_duration,
        ) == 1

        row = self.session.execute(
            select(UserModel.login_attempts, UserModel.lock_until).where(UserModel.id == user_id.value)
        ).one()
        return LoginAttemptState(
            login_attempts=row.login_attempts,
            lock_until=row.lock_until,
            just_locked=just_locked,
        )

    async def reset_login_attempts(self, user_id: UserId) -> None:
        self._conditional_update(user_id, login_attempts=0, lock_until=None)

    async def claim_verification_resend(
        self,
        user_id: UserId,
        now: datetime,
        cooldown: timedelta,
        window: timedelta,
        daily_cap: int
    ) -> Optional[int]:
        # Window anchored on the latest send: once that is older than the window, start over
        self._conditional_update(
            user_id,
            or_(
                UserModel.last_verification_resend.is_(None),
                UserModel.last_verification_resend < now - window,
            ),
            verification_resend_count=0,
        )

        claimed = self._conditional_update(
            user_id,
            UserModel.verification_resend_count < daily_cap,
            or_(
                UserModel.last_verification_resend.is_(None),
                UserModel.last_verification_resend <= now - cooldown,
            ),
            verification_resend_count=UserModel.verification_resend_count + 1,
            last_verification_resend=now,
        )
        if claimed != 1:
            return None

        return self.session.execute(
            select(UserModel.verification_resend_count).where(UserModel.id == user_id.value)
        ).scalar_one()

    async def consume_verification_token(self, user_id: UserId, token: str, now: datetime) -> bool:
        return self._conditional_update(
            user_id,
            UserModel.verification_token == token,
            UserModel.verification_token_expires_at > now,
            is_verified=True,
            verification_token=None,
            verification_token_expires_at=None,
            verification_resend_count=0,
            last_verification_resend=None,
            updated_at=now,
        ) == 1

    async def consume_password_reset(
        self,
        user_id: UserId,
        token_hash: str,
        new_hashed_password: str,
        now: datetime
    ) -> bool:
        return self._conditional_update(
            user_id,
            UserModel.password_reset_token_hash == token_hash,
            UserModel.password_reset_expires_at > now,
            hashed_password=new_hashed_password,
            password_reset_token_hash=None,
            password_reset_expires_at=None,
            login_attempts=0,
            lock_until=None,
            updated_at=now,
        ) == 1

    async def touch_last_active(self, user_id: UserId, now: datetime) -> None:
        self._conditional_update(user_id, last_active=now)

    async def touch_chat_visit(self, user_id: UserId, now: datetime) -> None:
        self._conditional_update(user_id, last_chat_visit=now)

    def _update_model_from_entity(self, model: UserModel, user: User) -> None:
        """Copy everything except the security counters"""
        model.email = str(user.email)
        model.full_name = user.full_name
        model.hashed_password = user.hashed_password
        model.role = user.role
        model.auth_provider = user.auth_provider
        model.google_id = user.google_id
        model.avatar = user.avatar
        model.is_verified = user.is_verified
        model.verification_token = user.verification.value if user.verification else None
        model.verification_token_expires_at = user.verification.expires_at if user.verification else None
        model.password_reset_token_hash = user.password_reset.value if user.password_reset else None
        model.password_reset_expires_at = user.password_reset.expires_at if user.password_reset else None
        model.updated_at = user.updated_at
        model.last_login = user.last_login

    def _map_to_entity(self, model: UserModel) -> User:
        """Map ORM model to domain entity"""
        verification = None
        if model.verification_token and model.verification_token_expires_at:
            verification = IssuedToken(model.verification_token, model.verification_token_expires_at)
        password_reset = None
        if model.password_reset_token_hash and model.password_reset_expires_at:
            password_reset = IssuedToken(model.password_reset_token_hash, model.password_reset_expires_at)

        return User(
            id=UserId(model.id),
            email=Email(model.email),
            full_name=model.full_name,
            hashed_password=model.hashed_password,
            role=UserRole(model.role),
            auth_provider=AuthProvider(model.auth_provider),
            google_id=model.google_id,
            avatar=model.avatar,
            is_verified=model.is_verified,
            verification=verification,
            password_reset=password_reset,
            login_attempts=model.login_attempts or 0,
            lock_until=model.lock_until,
            verification_resend_count=model.verification_resend_count or 0,
            last_verification_resend=model.last_verification_resend,
            last_login=model.last_login,
            last_active=model.last_active,
            last_chat_visit=model.last_chat_visit,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
