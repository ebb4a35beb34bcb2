"""Staff repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple

from ..entities.staff import Staff
from ..value_objects.email import Email
from ..value_objects.entity_ids import StaffId


class IStaffRepository(ABC):

    @abstractmethod
    async def get_by_id(self, staff_id: StaffId) -> Optional[Staff]:
        pass

    @abstractmethod
    async def get_by_email(self, email: Email) -> Optional[Staff]:
        pass

    @abstractmethod
    async def add(self, staff: Staff) -> Staff:
        pass

    @abstractmethod
    async def update(self, staff: Staff) -> Staff:
        pass

    @abstractmethod
    async def delete(self, staff_id: StaffId) -> None:
        pass

    @abstractmethod
    async def search(
        self,
        search: str,
        department: Optional[str],
        sort_by: str,
        offset: int,
        limit: int
    ) -> Tuple[List[Staff], int]:
        """One page of matching staff and the total match count"""
        pass

    @abstractmethod
    async def distinct_departments(self) -> List[str]:
        pass
