"""User DTOs for API layer"""

from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
from uuid import UUID

from ...domain.entities.user import User
from ...core.security import create_access_token, create_refresh_token


class RegisterUserDto(BaseModel):
    """DTO for user registration"""
    full_name: str
    email: EmailStr
    password: str


class LoginUserDto(BaseModel):
    """DTO for user login"""
    email: EmailStr
    password: str


class ForgotPasswordDto(BaseModel):
    """DTO for forgot password request"""
    email: EmailStr


class ResetPasswordDto(BaseModel):
    token: str
    password: str


class VerifyEmailDto(BaseModel):
    """DTO for email verification request"""
    token: str


class RefreshTokenDto(BaseModel):
    """DTO for refresh token request"""
    refresh_token: str


class GoogleOAuthDto(BaseModel):
    """DTO for Google OAuth request"""
    google_token: str


class UpdateProfileDto(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None


class ChangePasswordDto(BaseModel):
    current_password: str
    new_password: str


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ResendVerificationResponse(MessageResponse):
    remaining_attempts: int


class UserDto(BaseModel):
    """DTO for user response"""
    id: UUID
    email: str
    full_name: str
    role: str
    auth_provider: str
    is_verified: bool
    avatar: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> 'UserDto':
        return cls(
            id=user.id.value,
            email=str(user.email),
            full_name=user.full_name,
            role=user.role.value,
            auth_provider=user.auth_provider.value,
            is_verified=user.is_verified,
            avatar=user.avatar,
            created_at=user.created_at,
            last_login=user.last_login
        )


class TokenDto(BaseModel):
    """DTO for authentication tokens"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AccessTokenDto(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User response with token"""
    user: UserDto
    tokens: TokenDto

    @classmethod
    def for_user(cls, user: User) -> 'UserResponse':
        """Open a session: profile plus a fresh access/refresh pair"""
        subject = str(user.id)
        return cls(
            user=UserDto.from_entity(user),
            tokens=TokenDto(
                access_token=create_access_token(subject),
                refresh_token=create_refresh_token(subject)
            )
        )
