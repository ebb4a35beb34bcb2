"""Resource DTOs for API layer"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from uuid import UUID

from ...domain.entities.resource import Resource
from ...domain.enums import ResourceType


class SubmitResourceDto(BaseModel):
    """DTO for a new resource submission; the file itself is uploaded first"""
    course_name: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    resource_type: ResourceType
    department: str = Field(..., min_length=1)
    semester: str = Field(..., min_length=1)
    section: str = Field(..., min_length=1)
    batch: str = Field(..., min_length=1)
    year: int = Field(..., ge=1900, le=3000)
    file_name: str
    file_url: str
    file_size: str
    file_type: str
    storage_path: Optional[str] = None
    pages: int = Field(default=0, ge=0)
    thumbnail_url: Optional[str] = None


class RejectResourceDto(BaseModel):
    reason: str = ""


class ResourceQueryDto(BaseModel):
    """Listing filters; "All" disables a filter"""
    search: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[str] = None
    resource_type: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None
    batch: Optional[str] = None


class ResourceDto(BaseModel):
    id: UUID
    course_name: str
    title: str
    description: str
    resource_type: str
    department: str
    semester: str
    section: str
    batch: str
    year: int
    file_name: str
    file_url: str
    file_size: str
    file_type: str
    pages: int
    thumbnail_url: Optional[str] = None
    uploaded_by: Optional[UUID] = None
    uploader_name: str
    uploader_email: str
    status: str
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    download_count: int
    view_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, resource: Resource) -> 'ResourceDto':
        return cls(
            id=resource.id.value,
            course_name=resource.course_name,
            title=resource.title,
            description=resource.description,
            resource_type=resource.resource_type.value,
            department=resource.department,
            semester=resource.semester,
            section=resource.section,
            batch=resource.batch,
            year=resource.year,
            file_name=resource.file_name,
            file_url=resource.file_url,
            file_size=resource.file_size,
            file_type=resource.file_type,
            pages=resource.pages,
            thumbnail_url=resource.thumbnail_url,
            uploaded_by=resource.uploaded_by.value if resource.uploaded_by else None,
            uploader_name=resource.uploader_name,
            uploader_email=resource.uploader_email,
            status=resource.status.value,
            rejection_reason=resource.rejection_reason,
            reviewed_by=resource.reviewed_by.value if resource.reviewed_by else None,
            reviewed_at=resource.reviewed_at,
            download_count=resource.download_count,
            view_count=resource.view_count,
            created_at=resource.created_at,
            updated_at=resource.updated_at
        )


class SubmitResourceResponse(BaseModel):
    success: bool = True
    message: str
    resource: ResourceDto


class ResourceActionResponse(BaseModel):
    success: bool = True
    message: str
    resource: Optional[ResourceDto] = None


class ResourcesByYearResponse(BaseModel):
    success: bool = True
    count: int
    resources: Dict[int, List[ResourceDto]]


class ResourcesByStatusResponse(BaseModel):
    success: bool = True
    count: int
    resources: Dict[str, List[ResourceDto]]


class ResourceListResponse(BaseModel):
    success: bool = True
    count: int
    resources: List[ResourceDto]


class ResourceStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int


class AdminResourceListResponse(BaseModel):
    success: bool = True
    stats: ResourceStats
    resources: List[ResourceDto]


class ResourceCountsResponse(BaseModel):
    success: bool = True
    counts: Dict[str, int]


class CounterResponse(BaseModel):
    success: bool = True
    message: str
    count: int
