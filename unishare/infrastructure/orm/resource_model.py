"""Resource ORM Model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Uuid, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base, enum_column
from ...domain.enums import ResourceStatus, ResourceType


class ResourceModel(Base):
    __tablename__ = 'resources'
    __table_args__ = (
        Index('ix_resources_department_semester_status', 'department', 'semester', 'status'),
        CheckConstraint('download_count >= 0', name='ck_resources_download_count_non_negative'),
        CheckConstraint('view_count >= 0', name='ck_resources_view_count_non_negative'),
    )

    id = Column(Uuid, primary_key=True)

    # Content
    course_name = Column(String(200), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    resource_type = Column(enum_column(ResourceType, 'resource_type'), nullable=False, index=True)
    department = Column(String, nullable=False)
    semester = Column(String, nullable=False)
    section = Column(String, nullable=False)
    batch = Column(String, nullable=False)
    year = Column(Integer, nullable=False, index=True)

    # File
    file_name = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_size = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    storage_path = Column(String, nullable=True)
    pages = Column(Integer, default=0, nullable=False)
    thumbnail_url = Column(String, nullable=True)

    # Submitter (name/email cached for notifications)
    uploaded_by = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    uploader_name = Column(String, nullable=False, default="")
    uploader_email = Column(String, nullable=False, default="")

    # Moderation
    status = Column(enum_column(ResourceStatus, 'resource_status'), default=ResourceStatus.PENDING, nullable=False, index=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    download_count = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    uploader = relationship('UserModel', back_populates='resources', foreign_keys=[uploaded_by])
