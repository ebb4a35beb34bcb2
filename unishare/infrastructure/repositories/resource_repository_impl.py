"""Resource repository implementation"""

from datetime import datetime
from typing import Dict, Optional, List

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from ...domain.repositories.resource_repository import IResourceRepository, ResourceFilter
from ...domain.entities.resource import Resource
from ...domain.enums import ResourceCounter, ResourceStatus, ResourceType
from ...domain.value_objects.entity_ids import ResourceId, UserId
from ..orm.resource_model import ResourceModel

SEARCHABLE_COLUMNS = (
    ResourceModel.course_name,
    ResourceModel.title,
    ResourceModel.description,
    ResourceModel.department,
    ResourceModel.semester,
)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ResourceRepositoryImpl(IResourceRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, resource_id: ResourceId) -> Optional[Resource]:
        model = self.session.query(ResourceModel).filter(ResourceModel.id == resource_id.value).first()
        return self._map_to_entity(model) if model else None

    async def add(self, resource: Resource) -> Resource:
        model = ResourceModel(
            id=resource.id.value,
            course_name=resource.course_name,
            title=resource.title,
            description=resource.description,
            resource_type=resource.resource_type,
            department=resource.department,
            semester=resource.semester,
            section=resource.section,
            batch=resource.batch,
            year=resource.year,
            file_name=resource.file_name,
            file_url=resource.file_url,
            file_size=resource.file_size,
            file_type=resource.file_type,
            storage_path=resource.storage_path,
            pages=resource.pages,
            thumbnail_url=resource.thumbnail_url,
            uploaded_by=resource.uploaded_by.value if resource.uploaded_by else None,
            uploader_name=resource.uploader_name,
            uploader_email=resource.uploader_email,
            status=resource.status,
            rejection_reason=resource.rejection_reason,
            reviewed_by=resource.reviewed_by.value if resource.reviewed_by else None,
            reviewed_at=resource.reviewed_at,
            download_count=resource.download_count,
            view_count=resource.view_count,
            created_at=resource.created_at,
            updated_at=resource.updated_at,
        )
        self.session.add(model)
        self.session.flush()
        return resource

    async def delete(self, resource_id: ResourceId) -> None:
        model = self.session.query(ResourceModel).filter(ResourceModel.id == resource_id.value).first()
        if model:
            self.session.delete(model)
            self.session.flush()

    async def search_approved(self, filters: ResourceFilter) -> List[Resource]:
        query = self.session.query(ResourceModel).filter(ResourceModel.status == ResourceStatus.APPROVED)

        if filters.department:
            query = query.filter(ResourceModel.department == filters.department)
        if filters.semester:
            query = query.filter(ResourceModel.semester == filters.semester)
        if filters.resource_type:
            query = query.filter(ResourceModel.resource_type == filters.resource_type)
        if filters.year is not None:
            query = query.filter(ResourceModel.year == filters.year)
        if filters.section:
            query = query.filter(ResourceModel.section == filters.section)
        if filters.batch:
            query = query.filter(ResourceModel.batch == filters.batch)
        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            query = query.filter(or_(*(column.ilike(pattern, escape="\\") for column in SEARCHABLE_COLUMNS)))

        models = query.order_by(ResourceModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def list_by_uploader(self, user_id: UserId) -> List[Resource]:
        models = self.session.query(ResourceModel).filter(
            ResourceModel.uploaded_by == user_id.value
        ).order_by(ResourceModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def list_by_status(self, status: Optional[ResourceStatus] = None) -> List[Resource]:
        query = self.session.query(ResourceModel)
        if status is not None:
            query = query.filter(ResourceModel.status == status)
        models = query.order_by(ResourceModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def count_approved_by_type(self, department: str, semester: str) -> Dict[str, int]:
        rows = self.session.query(
            ResourceModel.resource_type, func.count(ResourceModel.id)
        ).filter(
            ResourceModel.department == department,
            ResourceModel.semester == semester,
            ResourceModel.status == ResourceStatus.APPROVED
        ).group_by(ResourceModel.resource_type).all()
        return {ResourceType(resource_type).value: count for resource_type, count in rows}

    async def transition_from_pending(
        self,
        resource_id: ResourceId,
        target: ResourceStatus,
        reviewer_id: UserId,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None
    ) -> bool:
        result = self.session.execute(
            update(ResourceModel)
            .where(ResourceModel.id == resource_id.value, ResourceModel.status == ResourceStatus.PENDING)
            .values(
                status=target,
                reviewed_by=reviewer_id.value,
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason if target == ResourceStatus.REJECTED else None,
                updated_at=reviewed_at,
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def increment_counter(self, resource_id: ResourceId, counter: ResourceCounter) -> Optional[int]:
        column = getattr(ResourceModel, counter.value)
        result = self.session.execute(
            update(ResourceModel)
            .where(ResourceModel.id == resource_id.value)
            .values({column: column + 1})
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount == 0:
            return None
        return self.session.execute(
            select(column).where(ResourceModel.id == resource_id.value)
        ).scalar_one()

    def _map_to_entity(self, model: ResourceModel) -> Resource:
        return Resource(
            id=ResourceId(model.id),
            course_name=model.course_name,
            title=model.title,
            description=model.description,
            resource_type=ResourceType(model.resource_type),
            department=model.department,
            semester=model.semester,
            section=model.section,
            batch=model.batch,
            year=model.year,
            file_name=model.file_name,
            file_url=model.file_url,
            file_size=model.file_size,
            file_type=model.file_type,
            storage_path=model.storage_path,
            pages=model.pages or 0,
            thumbnail_url=model.thumbnail_url,
            uploaded_by=UserId(model.uploaded_by) if model.uploaded_by else None,
            uploader_name=model.uploader_name,
            uploader_email=model.uploader_email,
            status=ResourceStatus(model.status),
            rejection_reason=model.rejection_reason,
            reviewed_by=UserId(model.reviewed_by) if model.reviewed_by else None,
            reviewed_at=model.reviewed_at,
            download_count=model.download_count or 0,
            view_count=model.view_count or 0,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
