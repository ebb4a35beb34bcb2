"""SMTP email transport"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from ...core.config import settings
from ...domain.services.notifications import Notification, SendResult

logger = logging.getLogger(__name__)


class EmailService:

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.timeout = settings.SMTP_TIMEOUT_SECONDS
        self.from_email = settings.FROM_EMAIL
        self.from_name = settings.FROM_NAME

    def _build_message(self, notification: Notification, message_id: str) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = notification.subject
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = notification.recipient
        msg['Message-ID'] = message_id
        msg.attach(MIMEText(notification.html_body, 'html'))
        return msg

    def send_sync(self, notification: Notification) -> SendResult:
        """Deliver one message. Transport failures are reported, not raised."""
        message_id = make_msgid(domain=self.from_email.split("@")[-1])
        msg = self._build_message(notification, message_id)

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_username and self.smtp_password:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending '{notification.subject}' to {notification.recipient}: {e}")
            return SendResult(success=False, error=str(e))

        logger.info(f"Email '{notification.category}' sent to {notification.recipient}")
        return SendResult(success=True, message_id=message_id)

    async def send(self, notification: Notification) -> SendResult:
        """Send via SMTP in the default executor so the event loop is not blocked"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.send_sync, notification)
