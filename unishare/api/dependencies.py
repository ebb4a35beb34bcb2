"""API dependencies"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.security import verify_token
from ..db.database import get_db
from ..domain.entities.user import User
from ..domain.exceptions import InvalidInputError
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.services.file_storage import IFileStorage
from ..domain.services.notifications import INotificationDispatcher
from ..domain.services.presence import IPresenceRegistry
from ..domain.value_objects.entity_ids import UserId
from ..infrastructure.external_services.notification_dispatcher import build_notification_dispatcher
from ..infrastructure.external_services.storage_service import StorageService
from ..infrastructure.presence_registry import InMemoryPresenceRegistry
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl


security = HTTPBearer()

# Process-wide collaborators; the lifespan in main starts and stops the dispatcher
notification_dispatcher = build_notification_dispatcher(settings.NOTIFICATION_BACKEND)
presence_registry = InMemoryPresenceRegistry()


def get_unit_of_work(db: Session = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


async def load_user_from_token(token: Optional[str], unit_of_work: IUnitOfWork) -> Optional[User]:
    """Resolve an access token to its account; None when either is invalid"""
    if not token:
        return None
    subject = verify_token(token)
    if not subject:
        return None
    try:
        user_id = UserId.from_str(subject)
    except InvalidInputError:
        return None

    async with unit_of_work:
        return await unit_of_work.users.get_by_id(user_id)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
) -> User:
    """Get current authenticated user"""
    user = await load_user_from_token(credentials.credentials, unit_of_work)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    return user


async def get_current_verified_user(current_user: User = Depends(get_current_user)) -> User:
    """Get current user with a verified email address"""
    if not current_user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only verified users can upload resources. Please verify your email first."
        )
    return current_user


async def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def get_storage_service() -> IFileStorage:
    """Get storage service"""
    return StorageService()


def get_notification_dispatcher() -> INotificationDispatcher:
    return notification_dispatcher


def get_presence_registry() -> IPresenceRegistry:
    return presence_registry


def get_client_ip(request: Request) -> Optional[str]:
    """Client address, honouring the first hop of X-Forwarded-For"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
