"""Staff directory DTOs"""

from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from ...domain.entities.staff import Staff, DEFAULT_STAFF_IMAGE, MAX_BIO_LENGTH
from ...domain.enums import Department

STAFF_SORT_FIELDS = ("name", "department", "created_at", "years_of_experience")
NULLABLE_STAFF_FIELDS = ("phone_number", "bio", "years_of_experience")
DEFAULT_STAFF_PAGE_SIZE = 6


class CreateStaffDto(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    department: Department
    qualification: str
    office: str
    counselling_hours: str
    image: str = DEFAULT_STAFF_IMAGE
    courses: List[str] = Field(default_factory=list)
    phone_number: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=MAX_BIO_LENGTH)
    specialization: List[str] = Field(default_factory=list)
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True


class UpdateStaffDto(BaseModel):
    """Partial update: only fields sent by the client are applied"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    department: Optional[Department] = None
    qualification: Optional[str] = None
    office: Optional[str] = None
    counselling_hours: Optional[str] = None
    image: Optional[str] = None
    courses: Optional[List[str]] = None
    phone_number: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=MAX_BIO_LENGTH)
    specialization: Optional[List[str]] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class StaffQueryDto(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_STAFF_PAGE_SIZE, ge=1, le=100)
    search: str = ""
    department: str = ""
    sort_by: str = "name"


class StaffDto(BaseModel):
    id: UUID
    name: str
    email: str
    department: str
    image: str
    courses: List[str]
    qualification: str
    office: str
    counselling_hours: str
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    specialization: List[str]
    years_of_experience: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, staff: Staff) -> 'StaffDto':
        return cls(
            id=staff.id.value,
            name=staff.name,
            email=str(staff.email),
            department=staff.department.value,
            image=staff.image,
            courses=list(staff.courses),
            qualification=staff.qualification,
            office=staff.office,
            counselling_hours=staff.counselling_hours,
            phone_number=staff.phone_number,
            bio=staff.bio,
            specialization=list(staff.specialization),
            years_of_experience=staff.years_of_experience,
            is_active=staff.is_active,
            created_at=staff.created_at,
            updated_at=staff.updated_at
        )


class PaginationDto(BaseModel):
    current_page: int
    total_pages: int
    total_staff: int
    has_more: bool


class StaffPageResponse(BaseModel):
    success: bool = True
    data: List[StaffDto]
    pagination: PaginationDto


class StaffResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: StaffDto


class DepartmentsResponse(BaseModel):
    success: bool = True
    data: List[str]
