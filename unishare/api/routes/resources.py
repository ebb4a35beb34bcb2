"""Resource routes: submission, browsing, moderation and counters"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import (
    get_current_admin_user,
    get_current_user,
    get_current_verified_user,
    get_notification_dispatcher,
    get_storage_service,
    get_unit_of_work,
)
from ...api.errors import unwrap
from ...application.dtos.resource_dtos import (
    SubmitResourceDto,
    RejectResourceDto,
    ResourceQueryDto,
    SubmitResourceResponse,
    ResourceActionResponse,
    ResourcesByYearResponse,
    ResourcesByStatusResponse,
    ResourceListResponse,
    AdminResourceListResponse,
    ResourceCountsResponse,
    CounterResponse,
)
from ...application.use_cases.resource_use_cases import (
    SubmitResourceUseCase,
    ListApprovedResourcesUseCase,
    ListMyResourcesUseCase,
    ListPendingResourcesUseCase,
    ListAllResourcesAdminUseCase,
    GetResourceCountsUseCase,
    IncrementResourceCounterUseCase,
    DeleteResourceUseCase,
)
from ...application.use_cases.resource_moderation_use_cases import (
    ApproveResourceUseCase,
    RejectResourceUseCase,
)
from ...domain.entities.user import User
from ...domain.enums import ResourceCounter
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.file_storage import IFileStorage
from ...domain.services.notifications import INotificationDispatcher
from ...domain.value_objects.entity_ids import ResourceId

router = APIRouter()


@router.post("/", response_model=SubmitResourceResponse, status_code=status.HTTP_201_CREATED)
async def submit_resource(
    request: SubmitResourceDto,
    current_user: User = Depends(get_current_verified_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Submit a resource for review (auto-approved for admins)"""
    use_case = SubmitResourceUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(current_user.id, request))


@router.get("/", response_model=ResourcesByYearResponse)
async def list_resources(
    query: ResourceQueryDto = Depends(),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Approved resources, newest first, grouped by year"""
    return unwrap(await ListApprovedResourcesUseCase(unit_of_work).execute(query))


@router.get("/counts", response_model=ResourceCountsResponse)
async def resource_counts(
    department: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Approved resource counts per type for one department and semester"""
    return unwrap(await GetResourceCountsUseCase(unit_of_work).execute(department, semester))


@router.get("/my-posts", response_model=ResourcesByStatusResponse)
async def my_resources(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return unwrap(await ListMyResourcesUseCase(unit_of_work).execute(current_user.id))


@router.get("/pending", response_model=ResourceListResponse)
async def pending_resources(
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Moderation queue (admin only)"""
    return unwrap(await ListPendingResourcesUseCase(unit_of_work).execute())


@router.get("/admin/all", response_model=AdminResourceListResponse)
async def all_resources(
    status_filter: Optional[str] = Query(None, alias="status"),
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return unwrap(await ListAllResourcesAdminUseCase(unit_of_work).execute(status_filter))


@router.put("/{resource_id}/approve", response_model=ResourceActionResponse)
async def approve_resource(
    resource_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher)
):
    use_case = ApproveResourceUseCase(unit_of_work, notifications)
    return unwrap(await use_case.execute(ResourceId(resource_id), admin_user.id))


@router.put("/{resource_id}/reject", response_model=ResourceActionResponse)
async def reject_resource(
    resource_id: UUID,
    request: RejectResourceDto,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    notifications: INotificationDispatcher = Depends(get_notification_dispatcher),
    storage: IFileStorage = Depends(get_storage_service)
):
    """Reject with a reason; the stored file is released"""
    use_case = RejectResourceUseCase(unit_of_work, notifications, storage)
    return unwrap(await use_case.execute(ResourceId(resource_id), admin_user.id, request))


@router.delete("/{resource_id}", response_model=ResourceActionResponse)
async def delete_resource(
    resource_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: IFileStorage = Depends(get_storage_service)
):
    """Delete a resource (owner or admin)"""
    use_case = DeleteResourceUseCase(unit_of_work, storage)
    return unwrap(await use_case.execute(ResourceId(resource_id), current_user.id))


@router.post("/{resource_id}/download", response_model=CounterResponse)
async def track_download(
    resource_id: UUID,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    use_case = IncrementResourceCounterUseCase(unit_of_work, ResourceCounter.DOWNLOADS)
    return unwrap(await use_case.execute(ResourceId(resource_id)))


@router.post("/{resource_id}/view", response_model=CounterResponse)
async def track_view(
    resource_id: UUID,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    use_case = IncrementResourceCounterUseCase(unit_of_work, ResourceCounter.VIEWS)
    return unwrap(await use_case.execute(ResourceId(resource_id)))
