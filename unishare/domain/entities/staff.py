"""Staff directory entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..value_objects.email import Email
from ..value_objects.entity_ids import StaffId
from ..enums import Department
from ..exceptions import InvalidInputError

DEFAULT_STAFF_IMAGE = "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=400&h=400&fit=crop"
MAX_BIO_LENGTH = 500


@dataclass
class Staff:
    id: StaffId
    name: str
    email: Email
    department: Department
    qualification: str
    office: str
    counselling_hours: str
    image: str = DEFAULT_STAFF_IMAGE
    courses: List[str] = field(default_factory=list)
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    specialization: List[str] = field(default_factory=list)
    years_of_experience: Optional[int] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise InvalidInputError("Name is required", field="name")
        if self.bio and len(self.bio) > MAX_BIO_LENGTH:
            raise InvalidInputError(f"Bio must be at most {MAX_BIO_LENGTH} characters", field="bio")
        if self.years_of_experience is not None and self.years_of_experience < 0:
            raise InvalidInputError("Years of experience cannot be negative", field="years_of_experience")
        self.courses = [course.strip() for course in self.courses if course and course.strip()]

    def apply_changes(self, changes: dict) -> None:
        """Business logic: partial update, re-validated as a whole"""
        for name, value in changes.items():
            if name == "email":
                value = Email(value)
            elif name == "department":
                value = Department(value)
            setattr(self, name, value)
        self.updated_at = datetime.utcnow()
        self.__post_init__()
