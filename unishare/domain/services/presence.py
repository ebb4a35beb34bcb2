"""Chat presence port

Which accounts are connected to which chat room. Presence is ephemeral and
local to one server instance; it is never persisted.
"""

from abc import ABC, abstractmethod
from typing import Set

from ..value_objects.entity_ids import UserId


class IPresenceRegistry(ABC):

    @abstractmethod
    async def join(self, room_id: str, user_id: UserId) -> Set[UserId]:
        """Add the user and return the room's members afterwards"""
        pass

    @abstractmethod
    async def leave(self, room_id: str, user_id: UserId) -> Set[UserId]:
        """Remove the user and return the room's members afterwards"""
        pass

    @abstractmethod
    async def members(self, room_id: str) -> Set[UserId]:
        pass
