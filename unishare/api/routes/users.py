"""User routes for profile management"""

from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies import (
    get_current_admin_user,
    get_current_user,
    get_notification_dispatcher,
    get_unit_of_work,
)
from ...api.errors import unwrap
from ...application.dtos.user_dtos import ChangePasswordDto, MessageResponse, UpdateProfileDto, UserDto
from ...application.use_cases.change_password import ChangePasswordUseCase
from ...application.use_cases.get_user_profile import GetUserProfileUseCase
from ...application.use_cases.list_users import ListUsersUseCase
from ...application.use_cases.update_user_profile import UpdateUserProfileUseCase
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher

router = APIRouter()


@router.get("/", response_model=List[UserDto])
async def list_users(
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """List all accounts (admin only)"""
    return unwrap(await ListUsersUseCase(unit_of_work).execute())


@router.get("/me", response_model=UserDto)
async def get_current_user_profile(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Get current user profile"""
    return unwrap(await GetUserProfileUseCase(unit_of_work).execute(current_user.id))


@router.put("/me", response_model=UserDto)
async def update_current_user_profile(
    request: UpdateProfileDto,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Update name and/or email of the current user"""
    use_case = UpdateUserProfileUseCase(unit_of_work)
    return unwrap(await use_case.execute(current_user.id, request))


@router.post("/me/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordDto,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    use_case = ChangePasswordUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(current_user.id, request))
