import os

# Settings are read at import time
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "unishare-test-secret")
os.environ.setdefault("NOTIFICATION_BACKEND", "celery")

from datetime import datetime
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from unishare.core.security import create_access_token
from unishare.db.database import SessionLocal, engine
from unishare.db.models import Base
from unishare.domain.entities.user import User
from unishare.domain.enums import UserRole
from unishare.domain.services.file_storage import DeleteResult, IFileStorage, StoredObject
from unishare.domain.services.notifications import INotificationDispatcher, Notification
from unishare.domain.value_objects.email import Email
from unishare.infrastructure.presence_registry import InMemoryPresenceRegistry
from unishare.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl

import unishare.infrastructure.orm  # noqa: F401

PASSWORD = "secret123"
BUCKET_BASE = "http://storage.test/unishare-files/"


class RecordingDispatcher(INotificationDispatcher):
    def __init__(self):
        self.sent: List[Notification] = []

    def submit(self, notification: Notification) -> None:
        self.sent.append(notification)

    def categories(self) -> List[str]:
        return [n.category for n in self.sent]

    def last(self, category: str) -> Optional[Notification]:
        matching = [n for n in self.sent if n.category == category]
        return matching[-1] if matching else None


class RecordingStorage(IFileStorage):
    def __init__(self, fail_deletes: bool = False):
        self.fail_deletes = fail_deletes
        self.stored: List[str] = []
        self.deleted: List[str] = []

    async def store(self, data: bytes, name: str, content_type: Optional[str] = None) -> StoredObject:
        path = f"resources/{len(self.stored)}_{name}"
        self.stored.append(path)
        return StoredObject(url=f"{BUCKET_BASE}{path}", path=path)

    async def delete(self, path: str) -> DeleteResult:
        self.deleted.append(path)
        if self.fail_deletes:
            return DeleteResult(success=False, error="storage unavailable")
        return DeleteResult(success=True)

    def path_from_url(self, url: str) -> Optional[str]:
        if url and url.startswith(BUCKET_BASE):
            return url[len(BUCKET_BASE):]
        return None


class FrozenClock:
    """Callable clock the tests move by hand"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta) -> None:
        self.now = self.now + delta


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def uow(db_session):
    return UnitOfWorkImpl(db_session)


@pytest.fixture
def notifications():
    return RecordingDispatcher()


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def presence():
    return InMemoryPresenceRegistry()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def make_user(uow):
    async def _make_user(
        email: str = "student@uni.edu",
        full_name: str = "Sam Student",
        password: str = PASSWORD,
        role: UserRole = UserRole.STUDENT,
        verified: bool = True,
    ) -> User:
        user = User.create(Email(email), full_name, password)
        user.role = role
        user.is_verified = verified
        async with uow:
            await uow.users.add(user)
            await uow.commit()
        return user

    return _make_user


@pytest.fixture
def client(db_session, notifications, storage, presence):
    from unishare.main import app
    from unishare.api import dependencies

    app.dependency_overrides[dependencies.get_unit_of_work] = lambda: UnitOfWorkImpl(db_session)
    app.dependency_overrides[dependencies.get_notification_dispatcher] = lambda: notifications
    app.dependency_overrides[dependencies.get_storage_service] = lambda: storage
    app.dependency_overrides[dependencies.get_presence_registry] = lambda: presence
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
