"""Fire-and-forget notification dispatchers

Both hand a notification off and return immediately. A notification that
cannot be handed off or delivered is written to the dead-letter log and
dropped; nothing here retries.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Optional, Set

from kombu.exceptions import KombuError

from ...core.logging_config import DEAD_LETTER_LOGGER
from ...domain.services.notifications import INotificationDispatcher, Notification
from .email_service import EmailService

logger = logging.getLogger(__name__)
dead_letter_logger = logging.getLogger(DEAD_LETTER_LOGGER)


def dead_letter(notification: Notification, error: str) -> None:
    dead_letter_logger.error(
        f"Dropped '{notification.category}' notification to {notification.recipient} "
        f"(subject: {notification.subject!r}): {error}"
    )


class CeleryNotificationDispatcher(INotificationDispatcher):
    """Enqueues the ``send_email`` task on the Redis broker.

    Publishing is a blocking broker round trip, so on an event loop it runs
    in the default executor and ``submit`` returns straight away. Outside a
    loop (inside a Celery worker) it publishes inline.
    """

    def __init__(self):
        self._pending: Set[asyncio.Future] = set()

    def submit(self, notification: Notification) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._publish(notification)
            return

        future = loop.run_in_executor(None, self._publish, notification)
        self._pending.add(future)
        future.add_done_callback(lambda done: self._finished(done, notification))

    async def drain(self) -> None:
        """Wait for publishes still in flight"""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _publish(self, notification: Notification) -> None:
        from ...tasks import send_email_task

        try:
            send_email_task.delay(asdict(notification))
        except (KombuError, OSError) as e:
            dead_letter(notification, f"enqueue failed: {e}")

    def _finished(self, future: asyncio.Future, notification: Notification) -> None:
        self._pending.discard(future)
        if future.cancelled():
            dead_letter(notification, "enqueue cancelled")
        elif future.exception() is not None:
            dead_letter(notification, f"enqueue failed: {future.exception()}")


class BackgroundNotificationDispatcher(INotificationDispatcher):
    """In-process queue drained by a single worker task.

    ``start`` and ``stop`` are called from the application lifespan.
    """

    def __init__(self, email_service: Optional[EmailService] = None, maxsize: int = 1000):
        self.email_service = email_service or EmailService()
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="notification-dispatcher")

    async def stop(self) -> None:
        """Drain what is queued, then stop the worker"""
        if self._worker is None:
            return
        await self.queue.join()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    def submit(self, notification: Notification) -> None:
        try:
            self.queue.put_nowait(notification)
        except asyncio.QueueFull:
            dead_letter(notification, "dispatch queue is full")

    async def _run(self) -> None:
        while True:
            notification = await self.queue.get()
            try:
                result = await self.email_service.send(notification)
                if not result.success:
                    dead_letter(notification, result.error or "send failed")
            except Exception as e:
                # Keep the worker alive whatever the transport does
                dead_letter(notification, f"unexpected error: {e}")
            finally:
                self.queue.task_done()


def build_notification_dispatcher(backend: str) -> INotificationDispatcher:
    """Dispatcher for the configured ``NOTIFICATION_BACKEND``"""
    if backend == "background":
        return BackgroundNotificationDispatcher()
    if backend == "celery":
        return CeleryNotificationDispatcher()
    raise ValueError(f"Unknown notification backend: {backend}")
