"""Register user use case"""

import logging

from sqlalchemy.exc import IntegrityError

from ...domain.entities.user import User
from ...domain.exceptions import AlreadyExistsError
from ...domain.value_objects.email import Email
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher
from ...infrastructure.external_services.email_templates import verification_email
from ..dtos.user_dtos import RegisterUserDto, UserResponse
from ..result import as_result

logger = logging.getLogger(__name__)


class RegisterUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, notifications: INotificationDispatcher):
        self.unit_of_work = unit_of_work
        self.notifications = notifications

    @as_result
    async def execute(self, request: RegisterUserDto) -> UserResponse:
        async with self.unit_of_work:
            email = Email(request.email)

            if await self.unit_of_work.users.exists_by_email(email):
                raise AlreadyExistsError("User with this email already exists", field="email")

            user = User.create(email=email, full_name=request.full_name, password=request.password)
            token = user.issue_verification_token()

            try:
                user = await self.unit_of_work.users.add(user)
                await self.unit_of_work.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration for the same address
                raise AlreadyExistsError("User with this email already exists", field="email")

        logger.info(f"Registered user {user.id}")
        self.notifications.submit(verification_email(str(user.email), user.full_name, token))

        return UserResponse.for_user(user)
