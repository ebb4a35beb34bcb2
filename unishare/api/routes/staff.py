"""Staff directory routes"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_current_admin_user, get_storage_service, get_unit_of_work
from ...api.errors import unwrap
from ...application.dtos.staff_dtos import (
    CreateStaffDto,
    UpdateStaffDto,
    StaffQueryDto,
    StaffPageResponse,
    StaffResponse,
    DepartmentsResponse,
)
from ...application.dtos.user_dtos import MessageResponse
from ...application.use_cases.staff_use_cases import (
    ListStaffUseCase,
    GetStaffUseCase,
    CreateStaffUseCase,
    UpdateStaffUseCase,
    DeleteStaffUseCase,
    ListDepartmentsUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.file_storage import IFileStorage
from ...domain.value_objects.entity_ids import StaffId

router = APIRouter()


@router.get("/", response_model=StaffPageResponse)
async def list_staff(
    query: StaffQueryDto = Depends(),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Paginated staff listing with search, department filter and sorting"""
    return unwrap(await ListStaffUseCase(unit_of_work).execute(query))


@router.get("/departments", response_model=DepartmentsResponse)
async def list_departments(unit_of_work: IUnitOfWork = Depends(get_unit_of_work)):
    return unwrap(await ListDepartmentsUseCase(unit_of_work).execute())


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(
    staff_id: UUID,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return unwrap(await GetStaffUseCase(unit_of_work).execute(StaffId(staff_id)))


@router.post("/", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    request: CreateStaffDto,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return unwrap(await CreateStaffUseCase(unit_of_work).execute(request))


@router.put("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: UUID,
    request: UpdateStaffDto,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Partial update; omitted fields are left unchanged"""
    return unwrap(await UpdateStaffUseCase(unit_of_work).execute(StaffId(staff_id), request))


@router.delete("/{staff_id}", response_model=MessageResponse)
async def delete_staff(
    staff_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: IFileStorage = Depends(get_storage_service)
):
    use_case = DeleteStaffUseCase(unit_of_work, storage)
    return unwrap(await use_case.execute(StaffId(staff_id)))
