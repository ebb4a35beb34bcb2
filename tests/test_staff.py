import pytest

from unishare.application.dtos.staff_dtos import CreateStaffDto, StaffQueryDto, UpdateStaffDto
from unishare.application.result import ErrorKind
from unishare.application.use_cases.staff_use_cases import (
    CreateStaffUseCase,
    DeleteStaffUseCase,
    GetStaffUseCase,
    ListDepartmentsUseCase,
    ListStaffUseCase,
    UpdateStaffUseCase,
)
from unishare.domain.value_objects.entity_ids import StaffId

from conftest import BUCKET_BASE


def staff_member(**overrides) -> CreateStaffDto:
    data = dict(
        name="Dr. Alan Turing",
        email="turing@uni.edu",
        department="Computer Science",
        qualification="PhD Mathematics",
        office="B-204",
        counselling_hours="Mon 10-12",
        courses=["Computability", " Logic ", ""],
        years_of_experience=12,
    )
    data.update(overrides)
    return CreateStaffDto(**data)


async def _create(uow, **overrides):
    result = await CreateStaffUseCase(uow).execute(staff_member(**overrides))
    assert result.ok
    return StaffId(result.data.data.id)


@pytest.fixture
async def directory(uow):
    await _create(uow)
    await _create(uow, name="Prof. Ada Lovelace", email="ada@uni.edu", years_of_experience=20)
    await _create(
        uow, name="Dr. Milton Friedman", email="milton@uni.edu", department="Economics",
        qualification="PhD Economics", courses=["Monetary Policy"], years_of_experience=3
    )


async def test_create_trims_course_list(uow):
    result = await CreateStaffUseCase(uow).execute(staff_member())

    assert result.ok
    assert result.data.data.courses == ["Computability", "Logic"]
    assert result.data.data.is_active


async def test_duplicate_email_is_already_exists(uow):
    await _create(uow)

    result = await CreateStaffUseCase(uow).execute(staff_member(name="Someone Else", email="Turing@uni.edu"))

    assert result.kind == ErrorKind.ALREADY_EXISTS


async def test_listing_is_paginated_and_sorted(uow, directory):
    page_one = await ListStaffUseCase(uow).execute(StaffQueryDto(limit=2))
    page_two = await ListStaffUseCase(uow).execute(StaffQueryDto(limit=2, page=2))

    assert [s.name for s in page_one.data.data] == ["Dr. Alan Turing", "Dr. Milton Friedman"]
    assert page_one.data.pagination.total_pages == 2
    assert page_one.data.pagination.has_more
    assert [s.name for s in page_two.data.data] == ["Prof. Ada Lovelace"]
    assert not page_two.data.pagination.has_more


async def test_listing_searches_and_filters_by_department(uow, directory):
    by_course = await ListStaffUseCase(uow).execute(StaffQueryDto(search="monetary"))
    by_department = await ListStaffUseCase(uow).execute(StaffQueryDto(department="Computer Science"))
    by_experience = await ListStaffUseCase(uow).execute(StaffQueryDto(sort_by="years_of_experience"))

    assert [s.name for s in by_course.data.data] == ["Dr. Milton Friedman"]
    assert by_department.data.pagination.total_staff == 2
    assert [s.years_of_experience for s in by_experience.data.data] == [3, 12, 20]


async def test_unknown_sort_field_is_validation_error(uow):
    result = await ListStaffUseCase(uow).execute(StaffQueryDto(sort_by="salary"))

    assert result.kind == ErrorKind.VALIDATION_ERROR


async def test_partial_update_only_touches_sent_fields(uow):
    staff_id = await _create(uow, bio="Father of computing", phone_number="+1 555 0100")

    result = await UpdateStaffUseCase(uow).execute(
        staff_id, UpdateStaffDto(office="C-101", bio=None, name=None)
    )

    assert result.ok
    fetched = (await GetStaffUseCase(uow).execute(staff_id)).data.data
    assert fetched.office == "C-101"
    assert fetched.bio is None
    assert fetched.name == "Dr. Alan Turing"
    assert fetched.phone_number == "+1 555 0100"


async def test_update_to_taken_email_is_refused(uow, directory):
    staff_id = await _create(uow, name="New Hire", email="new@uni.edu")

    result = await UpdateStaffUseCase(uow).execute(staff_id, UpdateStaffDto(email="ada@uni.edu"))

    assert result.kind == ErrorKind.ALREADY_EXISTS


async def test_delete_releases_image_in_our_bucket(uow, storage):
    hosted = await _create(uow, image=f"{BUCKET_BASE}staff/turing.jpg")
    external = await _create(uow, name="Prof. Ada Lovelace", email="ada@uni.edu")
    delete = DeleteStaffUseCase(uow, storage)

    assert (await delete.execute(hosted)).ok
    assert (await delete.execute(external)).ok
    assert storage.deleted == ["staff/turing.jpg"]
    assert (await GetStaffUseCase(uow).execute(hosted)).kind == ErrorKind.NOT_FOUND
    assert (await delete.execute(hosted)).kind == ErrorKind.NOT_FOUND


async def test_departments_are_distinct_and_sorted(uow, directory):
    result = await ListDepartmentsUseCase(uow).execute()

    assert result.data.data == ["Computer Science", "Economics"]
