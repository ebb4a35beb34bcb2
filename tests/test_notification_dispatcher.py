import asyncio
import logging
import threading

import pytest
from kombu.exceptions import OperationalError

from unishare import tasks
from unishare.core.logging_config import DEAD_LETTER_LOGGER
from unishare.domain.services.notifications import Notification, SendResult
from unishare.infrastructure.external_services.notification_dispatcher import (
    BackgroundNotificationDispatcher,
    CeleryNotificationDispatcher,
    build_notification_dispatcher,
)


def notification(category="welcome") -> Notification:
    return Notification(
        recipient="student@uni.edu",
        subject="Welcome to UniShare",
        html_body="<p>Hello</p>",
        category=category,
    )


class FakeEmailService:
    def __init__(self, outcome):
        self.outcome = outcome
        self.delivered = []

    async def send(self, item: Notification) -> SendResult:
        if isinstance(self.outcome, Exception):
            raise self.outcome
        self.delivered.append(item)
        return self.outcome

    def send_sync(self, item: Notification) -> SendResult:
        self.delivered.append(item)
        return self.outcome


def dead_letters(caplog):
    return [r.getMessage() for r in caplog.records if r.name == DEAD_LETTER_LOGGER]


async def _drain(dispatcher, *items):
    dispatcher.start()
    for item in items:
        dispatcher.submit(item)
    await dispatcher.stop()


async def test_background_dispatcher_delivers_in_order():
    service = FakeEmailService(SendResult(success=True, message_id="<1@uni.edu>"))
    dispatcher = BackgroundNotificationDispatcher(email_service=service)

    await _drain(dispatcher, notification("verification"), notification("welcome"))

    assert [n.category for n in service.delivered] == ["verification", "welcome"]


async def test_background_send_failure_is_dead_lettered(caplog):
    dispatcher = BackgroundNotificationDispatcher(
        email_service=FakeEmailService(SendResult(success=False, error="mailbox unavailable"))
    )

    with caplog.at_level(logging.ERROR, logger=DEAD_LETTER_LOGGER):
        await _drain(dispatcher, notification("login"))

    assert len(dead_letters(caplog)) == 1
    assert "'login'" in dead_letters(caplog)[0]
    assert "mailbox unavailable" in dead_letters(caplog)[0]


async def test_background_worker_survives_transport_exception(caplog):
    service = FakeEmailService(RuntimeError("boom"))
    dispatcher = BackgroundNotificationDispatcher(email_service=service)

    with caplog.at_level(logging.ERROR, logger=DEAD_LETTER_LOGGER):
        await _drain(dispatcher, notification(), notification())

    assert len(dead_letters(caplog)) == 2


async def test_full_queue_is_dead_lettered_without_blocking(caplog):
    dispatcher = BackgroundNotificationDispatcher(
        email_service=FakeEmailService(SendResult(success=True)), maxsize=1
    )

    with caplog.at_level(logging.ERROR, logger=DEAD_LETTER_LOGGER):
        dispatcher.submit(notification())
        dispatcher.submit(notification("password_reset"))

    assert dispatcher.queue.qsize() == 1
    assert "dispatch queue is full" in dead_letters(caplog)[0]


@pytest.mark.parametrize("error", [OperationalError("broker down"), ConnectionRefusedError("refused")])
async def test_celery_enqueue_failure_is_dead_lettered(monkeypatch, caplog, error):
    def refuse(payload):
        raise error

    monkeypatch.setattr(tasks.send_email_task, "delay", refuse)
    dispatcher = CeleryNotificationDispatcher()

    with caplog.at_level(logging.ERROR, logger=DEAD_LETTER_LOGGER):
        dispatcher.submit(notification("account_locked"))
        await dispatcher.drain()

    assert "enqueue failed" in dead_letters(caplog)[0]


async def test_celery_unexpected_publish_error_is_dead_lettered(monkeypatch, caplog):
    def explode(payload):
        raise RuntimeError("serializer exploded")

    monkeypatch.setattr(tasks.send_email_task, "delay", explode)
    dispatcher = CeleryNotificationDispatcher()

    with caplog.at_level(logging.ERROR, logger=DEAD_LETTER_LOGGER):
        dispatcher.submit(notification("login"))
        await dispatcher.drain()

    assert "serializer exploded" in dead_letters(caplog)[0]
    assert not dispatcher._pending


async def test_celery_submit_does_not_wait_for_the_broker(monkeypatch):
    release = threading.Event()
    published = []

    def slow_delay(payload):
        release.wait(5)
        published.append(payload["category"])

    monkeypatch.setattr(tasks.send_email_task, "delay", slow_delay)
    dispatcher = CeleryNotificationDispatcher()

    dispatcher.submit(notification("verification"))
    # Still on the loop with the broker call parked in the executor
    assert published == []
    assert len(dispatcher._pending) == 1

    release.set()
    await dispatcher.drain()

    assert published == ["verification"]


def test_celery_submit_outside_a_loop_publishes_inline(monkeypatch):
    published = []
    monkeypatch.setattr(tasks.send_email_task, "delay", lambda payload: published.append(payload))

    CeleryNotificationDispatcher().submit(notification("password_reset"))

    assert published[0]["category"] == "password_reset"


def test_celery_task_delivers_payload(monkeypatch):
    service = FakeEmailService(SendResult(success=True, message_id="<2@uni.edu>"))
    monkeypatch.setattr(tasks, "email_service", service)

    outcome = tasks.send_email_task.run(
        {"recipient": "a@uni.edu", "subject": "Hi", "html_body": "<p/>", "category": "welcome"}
    )

    assert outcome == {"success": True, "message_id": "<2@uni.edu>", "error": None}
    assert service.delivered[0].recipient == "a@uni.edu"


def test_celery_task_dead_letters_failed_delivery(monkeypatch, caplog):
    monkeypatch.setattr(tasks, "email_service", FakeEmailService(SendResult(success=False, error="550")))

    with caplog.at_level(logging.ERROR, logger=DEAD_LETTER_LOGGER):
        outcome = tasks.send_email_task.run(
            {"recipient": "a@uni.edu", "subject": "Hi", "html_body": "<p/>", "category": "welcome"}
        )

    assert not outcome["success"]
    assert "550" in dead_letters(caplog)[0]


def test_backend_selection():
    assert isinstance(build_notification_dispatcher("celery"), CeleryNotificationDispatcher)
    with pytest.raises(ValueError):
        build_notification_dispatcher("carrier-pigeon")


async def test_background_backend_selection():
    # The worker queue binds to the running loop
    dispatcher = build_notification_dispatcher("background")

    assert isinstance(dispatcher, BackgroundNotificationDispatcher)
    assert isinstance(dispatcher.queue, asyncio.Queue)
