import pytest

from unishare.application.dtos.resource_dtos import RejectResourceDto, SubmitResourceDto
from unishare.application.result import ErrorKind
from unishare.application.use_cases.resource_moderation_use_cases import (
    ApproveResourceUseCase,
    RejectResourceUseCase,
)
from unishare.application.use_cases.resource_use_cases import (
    DeleteResourceUseCase,
    IncrementResourceCounterUseCase,
    SubmitResourceUseCase,
)
from unishare.domain.enums import ResourceCounter, ResourceStatus, UserRole
from unishare.domain.value_objects.entity_ids import ResourceId

from conftest import BUCKET_BASE, RecordingStorage


def submission(**overrides) -> SubmitResourceDto:
    data = dict(
        course_name="Data Structures",
        title="Linked list notes",
        description="Week 3 lecture notes",
        resource_type="Notes",
        department="Computer Science",
        semester="3",
        section="A",
        batch="2024",
        year=2025,
        file_name="lists.pdf",
        file_url=f"{BUCKET_BASE}resources/abc_lists.pdf",
        file_size="1.20 MB",
        file_type="application/pdf",
        storage_path="resources/abc_lists.pdf",
        pages=12,
    )
    data.update(overrides)
    return SubmitResourceDto(**data)


@pytest.fixture
async def people(make_user):
    student = await make_user(email="student@uni.edu", full_name="Sam Student")
    admin = await make_user(email="admin@uni.edu", full_name="Ada Admin", role=UserRole.ADMIN)
    return student, admin


async def _submit(uow, notifications, user, **overrides):
    result = await SubmitResourceUseCase(uow, notifications).execute(user.id, submission(**overrides))
    assert result.ok
    return ResourceId(result.data.resource.id)


async def _status(uow, resource_id):
    async with uow:
        return (await uow.resources.get_by_id(resource_id)).status


async def test_student_submission_is_pending_and_admins_are_told(uow, notifications, people):
    student, admin = people

    result = await SubmitResourceUseCase(uow, notifications).execute(student.id, submission())

    assert result.data.resource.status == ResourceStatus.PENDING.value
    assert result.data.resource.uploader_name == "Sam Student"
    assert [n.recipient for n in notifications.sent] == ["admin@uni.edu"]
    assert notifications.sent[0].category == "new_submission"


async def test_admin_submission_is_auto_approved(uow, notifications, people):
    _, admin = people

    result = await SubmitResourceUseCase(uow, notifications).execute(admin.id, submission())

    assert result.data.resource.status == ResourceStatus.APPROVED.value
    assert result.data.resource.reviewed_by == admin.id.value
    assert notifications.sent == []


async def test_approve_moves_pending_to_approved_and_notifies(uow, notifications, clock, people):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)

    result = await ApproveResourceUseCase(uow, notifications, clock=clock).execute(resource_id, admin.id)

    assert result.ok
    assert result.data.resource.reviewed_at == clock.now
    assert await _status(uow, resource_id) == ResourceStatus.APPROVED
    assert notifications.last("resource_approved").recipient == "student@uni.edu"


async def test_second_review_is_invalid_state(uow, notifications, storage, clock, people):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)
    await ApproveResourceUseCase(uow, notifications, clock=clock).execute(resource_id, admin.id)

    again = await ApproveResourceUseCase(uow, notifications, clock=clock).execute(resource_id, admin.id)
    reject = await RejectResourceUseCase(uow, notifications, storage, clock=clock).execute(
        resource_id, admin.id, RejectResourceDto(reason="Duplicate")
    )

    assert again.kind == ErrorKind.INVALID_STATE
    assert reject.kind == ErrorKind.INVALID_STATE
    assert storage.deleted == []
    assert await _status(uow, resource_id) == ResourceStatus.APPROVED


async def test_conditional_transition_only_leaves_pending_once(uow, notifications, clock, people):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)

    async with uow:
        first = await uow.resources.transition_from_pending(
            resource_id, ResourceStatus.APPROVED, admin.id, clock.now
        )
        second = await uow.resources.transition_from_pending(
            resource_id, ResourceStatus.REJECTED, admin.id, clock.now, rejection_reason="Too late"
        )

    assert first is True
    assert second is False
    async with uow:
        stored = await uow.resources.get_by_id(resource_id)
    assert stored.status == ResourceStatus.APPROVED
    assert stored.rejection_reason is None


async def test_review_racing_a_committed_approval_is_invalid_state(
    uow, notifications, storage, clock, people, monkeypatch
):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)
    async with uow:
        stale = await uow.resources.get_by_id(resource_id)
    assert (await ApproveResourceUseCase(uow, notifications, clock=clock).execute(resource_id, admin.id)).ok

    async def stale_lookup(_):
        return stale

    # Both reviewers read the resource while it was still pending
    monkeypatch.setattr(uow.resources, "get_by_id", stale_lookup)
    approve = await ApproveResourceUseCase(uow, notifications, clock=clock).execute(resource_id, admin.id)
    reject = await RejectResourceUseCase(uow, notifications, storage, clock=clock).execute(
        resource_id, admin.id, RejectResourceDto(reason="Duplicate")
    )
    monkeypatch.undo()

    assert approve.kind == ErrorKind.INVALID_STATE
    assert reject.kind == ErrorKind.INVALID_STATE
    assert await _status(uow, resource_id) == ResourceStatus.APPROVED
    assert notifications.categories().count("resource_approved") == 1
    assert "resource_rejected" not in notifications.categories()


async def test_reject_requires_reason(uow, notifications, storage, clock, people):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)

    result = await RejectResourceUseCase(uow, notifications, storage, clock=clock).execute(
        resource_id, admin.id, RejectResourceDto(reason="   ")
    )

    assert result.kind == ErrorKind.VALIDATION_ERROR
    assert await _status(uow, resource_id) == ResourceStatus.PENDING


async def test_reject_releases_file_and_records_reason(uow, notifications, storage, clock, people):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)

    result = await RejectResourceUseCase(uow, notifications, storage, clock=clock).execute(
        resource_id, admin.id, RejectResourceDto(reason="Wrong course")
    )

    assert result.ok
    assert storage.deleted == ["resources/abc_lists.pdf"]
    async with uow:
        stored = await uow.resources.get_by_id(resource_id)
    assert stored.status == ResourceStatus.REJECTED
    assert stored.rejection_reason == "Wrong course"
    assert "Wrong course" in notifications.last("resource_rejected").html_body


async def test_reject_still_applies_when_file_delete_fails(uow, notifications, clock, people):
    student, admin = people
    resource_id = await _submit(uow, notifications, student)
    failing = RecordingStorage(fail_deletes=True)

    result = await RejectResourceUseCase(uow, notifications, failing, clock=clock).execute(
        resource_id, admin.id, RejectResourceDto(reason="Blurry scan")
    )

    assert result.ok
    assert await _status(uow, resource_id) == ResourceStatus.REJECTED


async def test_review_of_missing_resource_is_not_found(uow, notifications, clock, people):
    _, admin = people

    result = await ApproveResourceUseCase(uow, notifications, clock=clock).execute(ResourceId.generate(), admin.id)

    assert result.kind == ErrorKind.NOT_FOUND


async def test_delete_is_limited_to_owner_or_admin(uow, notifications, storage, people, make_user):
    student, admin = people
    other = await make_user(email="other@uni.edu", full_name="Olly Other")
    first = await _submit(uow, notifications, student)
    second = await _submit(uow, notifications, student, storage_path=None)
    delete = DeleteResourceUseCase(uow, storage)

    assert (await delete.execute(first, other.id)).kind == ErrorKind.UNAUTHORIZED
    assert (await delete.execute(first, student.id)).ok
    assert (await delete.execute(second, admin.id)).ok
    # The second path is derived from the public URL
    assert storage.deleted == ["resources/abc_lists.pdf", "resources/abc_lists.pdf"]
    async with uow:
        assert await uow.resources.get_by_id(first) is None


async def test_counters_increment_every_call(uow, notifications, people):
    student, _ = people
    resource_id = await _submit(uow, notifications, student)
    downloads = IncrementResourceCounterUseCase(uow, ResourceCounter.DOWNLOADS)
    views = IncrementResourceCounterUseCase(uow, ResourceCounter.VIEWS)

    await downloads.execute(resource_id)
    second = await downloads.execute(resource_id)
    view = await views.execute(resource_id)

    assert second.data.count == 2
    assert view.data.count == 1


async def test_counter_on_missing_resource_is_not_found(uow):
    result = await IncrementResourceCounterUseCase(uow, ResourceCounter.VIEWS).execute(ResourceId.generate())

    assert result.kind == ErrorKind.NOT_FOUND
