"""Resource submission, browsing, counters and deletion"""

import logging
from collections import OrderedDict
from typing import Optional

from ...domain.entities.resource import Resource
from ...domain.enums import ResourceCounter, ResourceStatus, ResourceType, UserRole
from ...domain.exceptions import InvalidInputError, NotFoundError, UnauthorizedError
from ...domain.repositories.resource_repository import ResourceFilter
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.file_storage import IFileStorage
from ...domain.services.notifications import INotificationDispatcher
from ...domain.value_objects.entity_ids import ResourceId, UserId
from ...infrastructure.external_services.email_templates import new_submission_email
from ..dtos.resource_dtos import (
    SubmitResourceDto,
    SubmitResourceResponse,
    ResourceQueryDto,
    ResourceDto,
    ResourcesByYearResponse,
    ResourcesByStatusResponse,
    ResourceListResponse,
    AdminResourceListResponse,
    ResourceStats,
    ResourceCountsResponse,
    CounterResponse,
    ResourceActionResponse,
)
from ..result import as_result

logger = logging.getLogger(__name__)

ALL = "All"


def _filter_value(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value or value == ALL:
        return None
    return value


async def release_resource_file(storage: IFileStorage, resource: Resource) -> bool:
    """Best-effort removal of a resource's stored file. Never raises."""
    path = resource.storage_path or (storage.path_from_url(resource.file_url) if resource.file_url else None)
    if not path:
        return True
    result = await storage.delete(path)
    if not result.success:
        logger.warning(f"Could not delete file {path} for resource {resource.id}: {result.error}")
    return result.success


class SubmitResourceUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, notifications: INotificationDispatcher):
        self.unit_of_work = unit_of_work
        self.notifications = notifications

    @as_result
    async def execute(self, submitter_id: UserId, request: SubmitResourceDto) -> SubmitResourceResponse:
        """Create a submission. Admin uploads skip the review queue."""
        async with self.unit_of_work:
            submitter = await self.unit_of_work.users.get_by_id(submitter_id)
            if not submitter:
                raise NotFoundError("User not found")

            resource = Resource.submit(submitter, **request.model_dump())
            resource = await self.unit_of_work.resources.add(resource)

            admins = []
            if resource.is_pending:
                admins = await self.unit_of_work.users.list_by_role(UserRole.ADMIN)

            await self.unit_of_work.commit()

        for admin in admins:
            self.notifications.submit(new_submission_email(
                str(admin.email),
                admin.full_name,
                submitter.full_name,
                resource.title,
                resource.course_name,
                resource.resource_type.value,
                resource.department,
                resource.semester,
            ))

        if resource.is_pending:
            message = "Resource uploaded successfully! It will be available after admin approval."
        else:
            message = "Resource uploaded and automatically approved!"
        return SubmitResourceResponse(message=message, resource=ResourceDto.from_entity(resource))


class ListApprovedResourcesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, query: ResourceQueryDto) -> ResourcesByYearResponse:
        resource_type = _filter_value(query.resource_type)
        year = _filter_value(query.year)
        try:
            filters = ResourceFilter(
                department=_filter_value(query.department),
                semester=_filter_value(query.semester),
                resource_type=ResourceType(resource_type) if resource_type else None,
                year=int(year) if year else None,
                section=_filter_value(query.section),
                batch=_filter_value(query.batch),
                search=_filter_value(query.search),
            )
        except ValueError:
            raise InvalidInputError("Invalid resource type or year filter")

        async with self.unit_of_work:
            resources = await self.unit_of_work.resources.search_approved(filters)

        grouped = OrderedDict()
        for resource in resources:
            grouped.setdefault(resource.year, []).append(ResourceDto.from_entity(resource))

        return ResourcesByYearResponse(count=len(resources), resources=grouped)


class ListMyResourcesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, user_id: UserId) -> ResourcesByStatusResponse:
        async with self.unit_of_work:
            resources = await self.unit_of_work.resources.list_by_uploader(user_id)

        grouped = {status.value: [] for status in ResourceStatus}
        for resource in resources:
            grouped[resource.status.value].append(ResourceDto.from_entity(resource))

        return ResourcesByStatusResponse(count=len(resources), resources=grouped)


class ListPendingResourcesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self) -> ResourceListResponse:
        async with self.unit_of_work:
            resources = await self.unit_of_work.resources.list_by_status(ResourceStatus.PENDING)

        return ResourceListResponse(
            count=len(resources),
            resources=[ResourceDto.from_entity(r) for r in resources]
        )


class ListAllResourcesAdminUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, status: Optional[str] = None) -> AdminResourceListResponse:
        status_filter = None
        if status and status.lower() != "all":
            try:
                status_filter = ResourceStatus(status.lower())
            except ValueError:
                raise InvalidInputError(f"Unknown status: {status}", field="status")

        async with self.unit_of_work:
            resources = await self.unit_of_work.resources.list_by_status(status_filter)

        stats = ResourceStats(
            total=len(resources),
            pending=sum(1 for r in resources if r.status == ResourceStatus.PENDING),
            approved=sum(1 for r in resources if r.status == ResourceStatus.APPROVED),
            rejected=sum(1 for r in resources if r.status == ResourceStatus.REJECTED),
        )
        return AdminResourceListResponse(
            stats=stats,
            resources=[ResourceDto.from_entity(r) for r in resources]
        )


class GetResourceCountsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, department: Optional[str], semester: Optional[str]) -> ResourceCountsResponse:
        if not department or not semester:
            raise InvalidInputError("Department and semester are required")

        async with self.unit_of_work:
            counts = await self.unit_of_work.resources.count_approved_by_type(department, semester)

        return ResourceCountsResponse(counts=counts)


class IncrementResourceCounterUseCase:
    """Download and view tracking. Every call counts; there is no dedup."""

    def __init__(self, unit_of_work: IUnitOfWork, counter: ResourceCounter):
        self.unit_of_work = unit_of_work
        self.counter = counter

    @as_result
    async def execute(self, resource_id: ResourceId) -> CounterResponse:
        async with self.unit_of_work:
            count = await self.unit_of_work.resources.increment_counter(resource_id, self.counter)
            if count is None:
                raise NotFoundError("Resource not found")
            await self.unit_of_work.commit()

        label = "Download" if self.counter == ResourceCounter.DOWNLOADS else "View"
        return CounterResponse(message=f"{label} count updated", count=count)


class DeleteResourceUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, storage: IFileStorage):
        self.unit_of_work = unit_of_work
        self.storage = storage

    @as_result
    async def execute(self, resource_id: ResourceId, actor_id: UserId) -> ResourceActionResponse:
        """Owner or admin only. The stored file goes first, then the record."""
        async with self.unit_of_work:
            actor = await self.unit_of_work.users.get_by_id(actor_id)
            resource = await self.unit_of_work.resources.get_by_id(resource_id)
            if not resource:
                raise NotFoundError("Resource not found")
            if not actor or not resource.can_be_deleted_by(actor):
                raise UnauthorizedError("Not authorized to delete this resource")

            await release_resource_file(self.storage, resource)

            await self.unit_of_work.resources.delete(resource_id)
            await self.unit_of_work.commit()

        logger.info(f"Resource {resource_id} deleted by {actor_id}")
        return ResourceActionResponse(message="Resource and file deleted successfully")
