"""Staff directory use cases"""

import logging
import math
from typing import List

from sqlalchemy.exc import IntegrityError

from ...domain.entities.staff import Staff
from ...domain.exceptions import AlreadyExistsError, InvalidInputError, NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.file_storage import IFileStorage
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import StaffId
from ..dtos.staff_dtos import (
    CreateStaffDto,
    UpdateStaffDto,
    StaffQueryDto,
    StaffDto,
    StaffPageResponse,
    PaginationDto,
    StaffResponse,
    DepartmentsResponse,
    STAFF_SORT_FIELDS,
    NULLABLE_STAFF_FIELDS,
)
from ..dtos.user_dtos import MessageResponse
from ..result import as_result

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "A staff member with this email already exists"


class ListStaffUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, query: StaffQueryDto) -> StaffPageResponse:
        if query.sort_by not in STAFF_SORT_FIELDS:
            raise InvalidInputError(
                f"sort_by must be one of: {', '.join(STAFF_SORT_FIELDS)}", field="sort_by"
            )
        offset = (query.page - 1) * query.limit

        async with self.unit_of_work:
            staff, total = await self.unit_of_work.staff.search(
                search=query.search.strip(),
                department=query.department.strip() or None,
                sort_by=query.sort_by,
                offset=offset,
                limit=query.limit,
            )

        return StaffPageResponse(
            data=[StaffDto.from_entity(member) for member in staff],
            pagination=PaginationDto(
                current_page=query.page,
                total_pages=math.ceil(total / query.limit),
                total_staff=total,
                has_more=offset + len(staff) < total,
            )
        )


class GetStaffUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, staff_id: StaffId) -> StaffResponse:
        async with self.unit_of_work:
            staff = await self.unit_of_work.staff.get_by_id(staff_id)
            if not staff:
                raise NotFoundError("Staff member not found")
            return StaffResponse(data=StaffDto.from_entity(staff))


class CreateStaffUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, request: CreateStaffDto) -> StaffResponse:
        email = Email(request.email)

        async with self.unit_of_work:
            if await self.unit_of_work.staff.get_by_email(email):
                raise AlreadyExistsError(DUPLICATE_EMAIL, field="email")

            fields = request.model_dump(exclude={"email"})
            staff = Staff(id=StaffId.generate(), email=email, **fields)
            try:
                staff = await self.unit_of_work.staff.add(staff)
                await self.unit_of_work.commit()
            except IntegrityError:
                raise AlreadyExistsError(DUPLICATE_EMAIL, field="email")

        logger.info(f"Staff member {staff.id} created")
        return StaffResponse(message="Staff member created successfully", data=StaffDto.from_entity(staff))


class UpdateStaffUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, staff_id: StaffId, request: UpdateStaffDto) -> StaffResponse:
        changes = request.model_dump(exclude_unset=True)

        async with self.unit_of_work:
            repo = self.unit_of_work.staff
            staff = await repo.get_by_id(staff_id)
            if not staff:
                raise NotFoundError("Staff member not found")

            if changes.get("email") is not None:
                new_email = Email(changes["email"])
                other = await repo.get_by_email(new_email)
                if other and other.id != staff.id:
                    raise AlreadyExistsError(DUPLICATE_EMAIL, field="email")

            # Only the optional fields may be cleared with an explicit null
            staff.apply_changes({
                name: value for name, value in changes.items()
                if value is not None or name in NULLABLE_STAFF_FIELDS
            })
            await repo.update(staff)
            await self.unit_of_work.commit()

        return StaffResponse(message="Staff member updated successfully", data=StaffDto.from_entity(staff))


class DeleteStaffUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, storage: IFileStorage):
        self.unit_of_work = unit_of_work
        self.storage = storage

    @as_result
    async def execute(self, staff_id: StaffId) -> MessageResponse:
        """Hard delete; a profile image held in our bucket is released first"""
        async with self.unit_of_work:
            staff = await self.unit_of_work.staff.get_by_id(staff_id)
            if not staff:
                raise NotFoundError("Staff member not found")

            path = self.storage.path_from_url(staff.image) if staff.image else None
            if path:
                result = await self.storage.delete(path)
                if not result.success:
                    logger.warning(f"Could not delete image {path} for staff {staff_id}: {result.error}")

            await self.unit_of_work.staff.delete(staff_id)
            await self.unit_of_work.commit()

        return MessageResponse(message="Staff member permanently deleted")


class ListDepartmentsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self) -> DepartmentsResponse:
        async with self.unit_of_work:
            departments: List[str] = await self.unit_of_work.staff.distinct_departments()
        return DepartmentsResponse(data=departments)
