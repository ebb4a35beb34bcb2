"""Security utilities"""

from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from .config import settings
import hashlib
import hmac
import secrets


# Password context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=4 if settings.TESTING else 10,
)


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password; an absent or unreadable hash never matches"""
    if not hashed_password or not plain_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(subject: str) -> str:
    """Create access token"""
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.utcnow() + expires_delta

    to_encode = {"exp": expire, "sub": subject, "type": "access"}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(subject: str) -> str:
    """Create refresh token"""
    expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    expire = datetime.utcnow() + expires_delta

    to_encode = {"exp": expire, "sub": subject, "type": "refresh"}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode(token: str, expected_type: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != expected_type:
        return None
    return payload.get("sub")


def verify_token(token: str) -> Optional[str]:
    """Verify access token and return subject"""
    return _decode(token, "access")


def verify_refresh_token(token: str) -> Optional[str]:
    """Verify refresh token and return subject"""
    return _decode(token, "refresh")


def generate_secure_token() -> str:
    """Generate a 256-bit random token, hex encoded."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """One-way hash used for tokens that must not be stored in plaintext."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def tokens_match(presented: str, stored: str) -> bool:
    """Constant-time token comparison"""
    return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))
