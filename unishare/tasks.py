import logging

from .celery_app import celery_app
from .domain.services.notifications import Notification
from .infrastructure.external_services.email_service import EmailService
from .infrastructure.external_services.notification_dispatcher import dead_letter

logger = logging.getLogger(__name__)

email_service = EmailService()


@celery_app.task(name="unishare.tasks.send_email")
def send_email_task(payload: dict) -> dict:
    """Background task to deliver one notification email.

    No retries: a failed delivery goes to the dead-letter log.
    """
    notification = Notification(**payload)
    result = email_service.send_sync(notification)

    if not result.success:
        dead_letter(notification, result.error or "send failed")
    return {"success": result.success, "message_id": result.message_id, "error": result.error}
