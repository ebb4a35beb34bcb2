"""Resource repository interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, List

from ..entities.resource import Resource
from ..enums import ResourceCounter, ResourceStatus, ResourceType
from ..value_objects.entity_ids import ResourceId, UserId


@dataclass(frozen=True)
class ResourceFilter:
    department: Optional[str] = None
    semester: Optional[str] = None
    resource_type: Optional[ResourceType] = None
    year: Optional[int] = None
    section: Optional[str] = None
    batch: Optional[str] = None
    search: Optional[str] = None


class IResourceRepository(ABC):

    @abstractmethod
    async def get_by_id(self, resource_id: ResourceId) -> Optional[Resource]:
        pass

    @abstractmethod
    async def add(self, resource: Resource) -> Resource:
        pass

    @abstractmethod
    async def delete(self, resource_id: ResourceId) -> None:
        pass

    @abstractmethod
    async def search_approved(self, filters: ResourceFilter) -> List[Resource]:
        """Approved resources matching the filters, newest first"""
        pass

    @abstractmethod
    async def list_by_uploader(self, user_id: UserId) -> List[Resource]:
        pass

    @abstractmethod
    async def list_by_status(self, status: Optional[ResourceStatus] = None) -> List[Resource]:
        pass

    @abstractmethod
    async def count_approved_by_type(self, department: str, semester: str) -> Dict[str, int]:
        pass

    @abstractmethod
    async def transition_from_pending(
        self,
        resource_id: ResourceId,
        target: ResourceStatus,
        reviewer_id: UserId,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None
    ) -> bool:
        """Move a resource out of pending. Applied only while the stored
        status is still pending; returns False when another review got
        there first."""
        pass

    @abstractmethod
    async def increment_counter(self, resource_id: ResourceId, counter: ResourceCounter) -> Optional[int]:
        """Increment-and-fetch; None if the resource does not exist"""
        pass
