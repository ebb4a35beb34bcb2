"""User ORM Model"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base, enum_column
from ...domain.enums import UserRole, AuthProvider


class UserModel(Base):
    __tablename__ = 'users'
    __table_args__ = (
        CheckConstraint('login_attempts >= 0', name='ck_users_login_attempts_non_negative'),
        CheckConstraint(
            'hashed_password IS NOT NULL OR google_id IS NOT NULL',
            name='ck_users_credential_present'
        ),
    )

    id = Column(Uuid, primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(100), nullable=False)
    hashed_password = Column(String, nullable=True)
    role = Column(enum_column(UserRole, 'user_role'), default=UserRole.STUDENT, nullable=False)
    auth_provider = Column(enum_column(AuthProvider, 'auth_provider'), default=AuthProvider.LOCAL, nullable=False)
    google_id = Column(String, unique=True, index=True, nullable=True)
    avatar = Column(String, nullable=True)

    # Email verification
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String, index=True, nullable=True)
    verification_token_expires_at = Column(DateTime, nullable=True)
    verification_resend_count = Column(Integer, default=0, nullable=False)
    last_verification_resend = Column(DateTime, nullable=True)

    # Password reset: only the sha256 of the issued token is kept
    password_reset_token_hash = Column(String, index=True, nullable=True)
    password_reset_expires_at = Column(DateTime, nullable=True)

    # Lockout
    login_attempts = Column(Integer, default=0, nullable=False)
    lock_until = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    last_login = Column(DateTime, nullable=True)
    last_active = Column(DateTime, nullable=True)
    last_chat_visit = Column(DateTime, nullable=True)

    # Relationships
    resources = relationship(
        'ResourceModel',
        back_populates='uploader',
        foreign_keys='ResourceModel.uploaded_by'
    )
