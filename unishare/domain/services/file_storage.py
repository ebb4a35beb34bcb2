"""Object storage port"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StoredObject:
    url: str
    path: str


@dataclass(frozen=True)
class DeleteResult:
    success: bool
    error: Optional[str] = None


class IFileStorage(ABC):

    @abstractmethod
    async def store(self, data: bytes, name: str, content_type: Optional[str] = None) -> StoredObject:
        pass

    @abstractmethod
    async def delete(self, path: str) -> DeleteResult:
        """Release a stored object. Reports failure in the result instead of raising."""
        pass

    @abstractmethod
    def path_from_url(self, url: str) -> Optional[str]:
        """Object path for a public URL served from this storage, or None."""
        pass
