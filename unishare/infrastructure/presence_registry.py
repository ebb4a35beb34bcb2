"""In-process chat presence registry"""

import asyncio
from collections import defaultdict
from typing import Dict, Set

from ..domain.services.presence import IPresenceRegistry
from ..domain.value_objects.entity_ids import UserId


class InMemoryPresenceRegistry(IPresenceRegistry):
    """Room id -> connected user ids, guarded by one asyncio lock.

    Scoped to this server instance. Several instances behind a load balancer
    each see only their own sockets.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[UserId]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def join(self, room_id: str, user_id: UserId) -> Set[UserId]:
        async with self._lock:
            self._rooms[room_id].add(user_id)
            return set(self._rooms[room_id])

    async def leave(self, room_id: str, user_id: UserId) -> Set[UserId]:
        async with self._lock:
            members = self._rooms.get(room_id)
            if members is None:
                return set()
            members.discard(user_id)
            if not members:
                del self._rooms[room_id]
                return set()
            return set(members)

    async def members(self, room_id: str) -> Set[UserId]:
        async with self._lock:
            return set(self._rooms.get(room_id, ()))
