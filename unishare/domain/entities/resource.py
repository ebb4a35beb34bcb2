"""Resource entity with moderation business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.entity_ids import ResourceId, UserId
from ..enums import ResourceStatus, ResourceType, UserRole
from ..exceptions import InvalidStateError, InvalidInputError
from .user import User


@dataclass
class Resource:
    id: ResourceId

    # Content metadata
    course_name: str
    title: str
    description: str
    resource_type: ResourceType
    department: str
    semester: str
    section: str
    batch: str
    year: int

    # File reference
    file_name: str
    file_url: str
    file_size: str
    file_type: str
    storage_path: Optional[str] = None
    pages: int = 0
    thumbnail_url: Optional[str] = None

    # Submitter, cached for notifications
    uploaded_by: Optional[UserId] = None
    uploader_name: str = ""
    uploader_email: str = ""

    # Moderation
    status: ResourceStatus = ResourceStatus.PENDING
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[UserId] = None
    reviewed_at: Optional[datetime] = None

    download_count: int = 0
    view_count: int = 0

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def submit(cls, submitter: User, **content) -> 'Resource':
        """Factory method: new submissions wait for review unless an admin uploads them"""
        resource = cls(
            id=ResourceId.generate(),
            uploaded_by=submitter.id,
            uploader_name=submitter.full_name,
            uploader_email=str(submitter.email),
            **content
        )
        if submitter.role == UserRole.ADMIN:
            resource.status = ResourceStatus.APPROVED
            resource.reviewed_by = submitter.id
            resource.reviewed_at = resource.created_at
        return resource

    @property
    def is_pending(self) -> bool:
        return self.status == ResourceStatus.PENDING

    def ensure_reviewable(self) -> None:
        if not self.is_pending:
            raise InvalidStateError("Resource has already been reviewed", status=self.status.value)

    def approve(self, reviewer_id: UserId, now: Optional[datetime] = None) -> None:
        """Business logic: pending -> approved"""
        self.ensure_reviewable()
        now = now or datetime.utcnow()
        self.status = ResourceStatus.APPROVED
        self.reviewed_by = reviewer_id
        self.reviewed_at = now
        self.updated_at = now

    def reject(self, reviewer_id: UserId, reason: str, now: Optional[datetime] = None) -> None:
        """Business logic: pending -> rejected, keeping the reason verbatim"""
        if not reason or not reason.strip():
            raise InvalidInputError("Rejection reason is required", field="reason")
        self.ensure_reviewable()
        now = now or datetime.utcnow()
        self.status = ResourceStatus.REJECTED
        self.rejection_reason = reason
        self.reviewed_by = reviewer_id
        self.reviewed_at = now
        self.updated_at = now

    def can_be_deleted_by(self, user: User) -> bool:
        return user.is_admin or (self.uploaded_by is not None and self.uploaded_by == user.id)
