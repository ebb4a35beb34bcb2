"""Chat message repository interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from ..entities.chat_message import ChatMessage
from ..value_objects.entity_ids import MessageId, UserId


class IChatRepository(ABC):

    @abstractmethod
    async def get_by_id(self, message_id: MessageId) -> Optional[ChatMessage]:
        pass

    @abstractmethod
    async def add(self, message: ChatMessage) -> ChatMessage:
        pass

    @abstractmethod
    async def list_room(self, room_id: str, limit: int, before: Optional[datetime] = None) -> List[ChatMessage]:
        """Latest non-deleted messages of a room, newest first"""
        pass

    @abstractmethod
    async def soft_delete(self, message_id: MessageId, owner_id: UserId, now: datetime, placeholder: str) -> bool:
        """Soft-delete a message, only if ``owner_id`` sent it"""
        pass

    @abstractmethod
    async def count_unread(self, room_id: str, user_id: UserId, since: Optional[datetime]) -> int:
        pass
