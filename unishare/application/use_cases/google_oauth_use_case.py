"""Google OAuth authentication use case"""

import logging
from datetime import datetime
from typing import Callable, Optional

from google.oauth2 import id_token
from google.auth.transport import requests

from ...core.config import settings
from ...domain.entities.user import User
from ...domain.exceptions import InvalidCredentialError, InvalidStateError
from ...domain.value_objects.email import Email
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notifications import INotificationDispatcher
from ...infrastructure.external_services.email_templates import (
    login_notification_email,
    welcome_email,
)
from ..dtos.user_dtos import GoogleOAuthDto, UserResponse
from ..result import as_result

logger = logging.getLogger(__name__)


def verify_google_token(token: str) -> dict:
    """Validate a Google ID token against our client id and return its claims"""
    return id_token.verify_oauth2_token(token, requests.Request(), settings.GOOGLE_CLIENT_ID)


class GoogleOAuthUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notifications: INotificationDispatcher,
        token_verifier: Callable[[str], dict] = verify_google_token
    ):
        self.unit_of_work = unit_of_work
        self.notifications = notifications
        self.token_verifier = token_verifier

    @as_result
    async def execute(self, request: GoogleOAuthDto, client_ip: Optional[str] = None) -> UserResponse:
        """Authenticate user with Google OAuth token"""
        if not settings.GOOGLE_CLIENT_ID:
            raise InvalidStateError("Google OAuth is not configured on the server")

        try:
            idinfo = self.token_verifier(request.google_token)
        except ValueError as e:
            logger.warning(f"Rejected Google ID token: {e}")
            raise InvalidCredentialError("Google authentication failed")

        google_user_id = idinfo.get("sub")
        if not google_user_id or not idinfo.get("email"):
            raise InvalidCredentialError("Google authentication failed")
        email = Email(idinfo["email"])
        full_name = idinfo.get("name") or " ".join(
            part for part in (idinfo.get("given_name"), idinfo.get("family_name")) if part
        )
        avatar = idinfo.get("picture")
        now = datetime.utcnow()

        async with self.unit_of_work:
            users = self.unit_of_work.users

            user = await users.get_by_google_id(google_user_id)
            if user is None:
                user = await users.get_by_email(email)

            is_new = user is None
            if is_new:
                user = User.create_from_google(email, full_name, google_user_id, avatar)
                user = await users.add(user)
            else:
                user.link_google(google_user_id, avatar)
                user.record_login(now)
                await users.update(user)

            await self.unit_of_work.commit()

        if is_new:
            logger.info(f"Created user {user.id} from Google sign-in")
            self.notifications.submit(welcome_email(str(user.email), user.full_name))
        else:
            self.notifications.submit(
                login_notification_email(str(user.email), user.full_name, now, client_ip)
            )

        return UserResponse.for_user(user)
