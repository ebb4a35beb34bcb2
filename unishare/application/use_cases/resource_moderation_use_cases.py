"""Resource moderation: pending -> approved | rejected

Both transitions are terminal and applied as a conditional update on the
stored status, so two reviewers racing on the same resource cannot both win.
"""

import logging
from datetime import datetime
from typing import Callable

from ...domain.enums import ResourceStatus
from ...domain.exceptions import InvalidInputError, InvalidStateError, NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.file_storage import IFileStorage
from ...domain.services.notifications import INotificationDispatcher
from ...domain.value_objects.entity_ids import ResourceId, UserId
from ...infrastructure.external_services.email_templates import (
    resource_approved_email,
    resource_rejected_email,
)
from ..dtos.resource_dtos import RejectResourceDto, ResourceActionResponse, ResourceDto
from ..result import as_result
from .resource_use_cases import release_resource_file

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "Resource has already been reviewed"


class ApproveResourceUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notifications: INotificationDispatcher,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.unit_of_work = unit_of_work
        self.notifications = notifications
        self.clock = clock

    @as_result
    async def execute(self, resource_id: ResourceId, reviewer_id: UserId) -> ResourceActionResponse:
        now = self.clock()

        async with self.unit_of_work:
            resources = self.unit_of_work.resources
            resource = await resources.get_by_id(resource_id)
            if not resource:
                raise NotFoundError("Resource not found")

            resource.approve(reviewer_id, now)

            applied = await resources.transition_from_pending(
                resource_id, ResourceStatus.APPROVED, reviewer_id, now
            )
            if not applied:
                raise InvalidStateError(ALREADY_REVIEWED)

            await self.unit_of_work.commit()

        logger.info(f"Resource {resource_id} approved by {reviewer_id}")
        self.notifications.submit(resource_approved_email(
            resource.uploader_email, resource.uploader_name, resource.title, resource.course_name
        ))

        return ResourceActionResponse(
            message="Resource approved successfully",
            resource=ResourceDto.from_entity(resource)
        )


class RejectResourceUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notifications: INotificationDispatcher,
        storage: IFileStorage,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.unit_of_work = unit_of_work
        self.notifications = notifications
        self.storage = storage
        self.clock = clock

    @as_result
    async def execute(
        self,
        resource_id: ResourceId,
        reviewer_id: UserId,
        request: RejectResourceDto
    ) -> ResourceActionResponse:
        reason = request.reason
        if not reason or not reason.strip():
            raise InvalidInputError("Rejection reason is required", field="reason")
        now = self.clock()

        async with self.unit_of_work:
            resources = self.unit_of_work.resources
            resource = await resources.get_by_id(resource_id)
            if not resource:
                raise NotFoundError("Resource not found")
            resource.ensure_reviewable()

            # File goes before the status flips; a failed delete does not block the rejection
            await release_resource_file(self.storage, resource)

            resource.reject(reviewer_id, reason, now)
            applied = await resources.transition_from_pending(
                resource_id, ResourceStatus.REJECTED, reviewer_id, now, rejection_reason=reason
            )
            if not applied:
                raise InvalidStateError(ALREADY_REVIEWED)

            await self.unit_of_work.commit()

        logger.info(f"Resource {resource_id} rejected by {reviewer_id}")
        self.notifications.submit(resource_rejected_email(
            resource.uploader_email, resource.uploader_name, resource.title, resource.course_name, reason
        ))

        return ResourceActionResponse(
            message="Resource rejected and file deleted",
            resource=ResourceDto.from_entity(resource)
        )
