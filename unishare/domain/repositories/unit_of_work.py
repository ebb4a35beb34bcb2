"""Unit of Work interface for transaction management"""

from abc import ABC, abstractmethod

from .user_repository import IUserRepository
from .resource_repository import IResourceRepository
from .staff_repository import IStaffRepository
from .chat_repository import IChatRepository


class IUnitOfWork(ABC):
    """Unit of Work interface for managing transactions across repositories"""

    users: IUserRepository
    resources: IResourceRepository
    staff: IStaffRepository
    chat: IChatRepository

    @abstractmethod
    async def __aenter__(self):
        """Enter async context"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context"""
        pass

    @abstractmethod
    async def commit(self):
        """Commit transaction"""
        pass

    @abstractmethod
    async def rollback(self):
        """Rollback transaction"""
        pass
