"""Authentication routes"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from ...api.dependencies import (
    get_client_ip,
    get_current_user,
    get_notification_dispatcher,
    get_unit_of_work,
)
from ...api.errors import unwrap
from ...application.use_cases.register_user import RegisterUserUseCase
from ...application.use_cases.login_user import LoginUserUseCase
from ...application.use_cases.forgot_password_use_case import ForgotPasswordUseCase
from ...application.use_cases.reset_password_use_case import ResetPasswordUseCase
from ...application.use_cases.email_verification_use_case import (
    EmailVerificationUseCase,
    ResendVerificationUseCase,
)
from ...application.use_cases.google_oauth_use_case import GoogleOAuthUseCase
from ...application.use_cases.get_user_profile import GetUserProfileUseCase
from ...application.use_cases.refresh_token import RefreshTokenUseCase
from ...application.dtos.user_dtos import (
    RegisterUserDto,
    LoginUserDto,
    ForgotPasswordDto,
    ResetPasswordDto,
    VerifyEmailDto,
    RefreshTokenDto,
    GoogleOAuthDto,
    UserResponse,
    UserDto,
    AccessTokenDto,
    MessageResponse,
    ResendVerificationResponse,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: RegisterUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Register a new user"""
    use_case = RegisterUserUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(user_data))


@router.post("/login", response_model=UserResponse)
async def login_user(
    login_data: LoginUserDto,
    client_ip: Optional[str] = Depends(get_client_ip),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Login user"""
    use_case = LoginUserUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(login_data, client_ip=client_ip))


@router.post("/logout", response_model=MessageResponse)
async def logout_user(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards them"""
    return MessageResponse(message="Logged out successfully")


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    request: VerifyEmailDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Verify user email with token"""
    use_case = EmailVerificationUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(request))


@router.get("/verify-email/{token}", response_model=MessageResponse)
async def verify_email_link(
    token: str,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Verify user email from the emailed link"""
    use_case = EmailVerificationUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(VerifyEmailDto(token=token)))


@router.post("/resend-verification", response_model=ResendVerificationResponse)
async def resend_verification(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Send a fresh verification email, subject to the resend limits"""
    use_case = ResendVerificationUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(current_user.id))


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Handle forgot password request"""
    use_case = ForgotPasswordUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(request))


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Reset password with token"""
    use_case = ResetPasswordUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(request))


@router.post("/google", response_model=UserResponse)
async def google_oauth_token(
    request: GoogleOAuthDto,
    client_ip: Optional[str] = Depends(get_client_ip),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Google OAuth authentication with ID token"""
    use_case = GoogleOAuthUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(request, client_ip=client_ip))


@router.post("/refresh", response_model=AccessTokenDto)
async def refresh_token(
    request: RefreshTokenDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Refresh access token"""
    use_case = RefreshTokenUseCase(unit_of_work)
    return unwrap(await use_case.execute(request))


@router.get("/me", response_model=UserDto)
async def get_me(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Get current user profile"""
    use_case = GetUserProfileUseCase(unit_of_work)
    return unwrap(await use_case.execute(current_user.id))
