"""HTML email templates

Each builder returns a ready-to-dispatch ``Notification``. Every interpolated
value is HTML-escaped.
"""

from datetime import datetime
from html import escape
from typing import Optional

from ...core.config import settings
from ...domain.services.notifications import Notification

_LAYOUT = """
<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: linear-gradient(135deg, {accent} 0%, #9333ea 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
        .content {{ background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }}
        .button {{ display: inline-block; background: {accent}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; margin: 20px 0; }}
        .box {{ background: white; padding: 15px; border-left: 4px solid {accent}; margin: 20px 0; }}
        .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 12px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{heading}</h1>
        </div>
        <div class="content">
            <h2>Hi {name}!</h2>
            {body}
        </div>
        <div class="footer">
            <p>&copy; {year} {project}. All rights reserved.</p>
        </div>
    </div>
</body>
</html>
"""

BLUE = "#2563eb"
GREEN = "#16a34a"
RED = "#dc2626"
AMBER = "#d97706"


def _render(heading: str, name: str, body: str, accent: str = BLUE) -> str:
    return _LAYOUT.format(
        accent=accent,
        heading=heading,
        name=escape(name or "there"),
        body=body,
        year=datetime.utcnow().year,
        project=escape(settings.PROJECT_NAME),
    )


def _button(url: str, label: str) -> str:
    safe_url = escape(url, quote=True)
    return (
        f'<div style="text-align: center;"><a href="{safe_url}" class="button">{escape(label)}</a></div>'
        f'<p>Or copy this link: <br><small>{safe_url}</small></p>'
    )


def _format_time(moment: datetime) -> str:
    return moment.strftime("%B %d, %Y at %H:%M UTC")


def _subject(text: str) -> str:
    return f"{text} - {settings.PROJECT_NAME}"


def welcome_email(to: str, name: str) -> Notification:
    body = (
        f"<p>Thank you for joining {escape(settings.PROJECT_NAME)}! Your email address is verified.</p>"
        "<p>You can now upload resources, browse course material and join your class chat.</p>"
    )
    return Notification(
        recipient=to,
        subject=f"Welcome to {settings.PROJECT_NAME}!",
        html_body=_render("Welcome aboard!", name, body),
        category="welcome",
    )


def verification_email(to: str, name: str, token: str) -> Notification:
    url = f"{settings.FRONTEND_URL}/verify-email/{token}"
    body = (
        "<p>Please verify your email address by clicking the button below:</p>"
        f"{_button(url, 'Verify Email Address')}"
        "<p><strong>This link will expire in 24 hours.</strong></p>"
        "<p>If you didn't create an account, please ignore this email.</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("Verify Your Email"),
        html_body=_render("Verify Your Email", name, body),
        category="verification",
    )


def login_notification_email(to: str, name: str, login_time: datetime, ip_address: Optional[str]) -> Notification:
    body = (
        "<p>We detected a new login to your account.</p>"
        f'<div class="box"><p><strong>Time:</strong> {escape(_format_time(login_time))}</p>'
        f"<p><strong>IP address:</strong> {escape(ip_address or 'unknown')}</p></div>"
        "<p>If this wasn't you, reset your password immediately.</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("New Login to Your Account"),
        html_body=_render("New Login Detected", name, body),
        category="login",
    )


def password_reset_email(to: str, name: str, token: str) -> Notification:
    url = f"{settings.FRONTEND_URL}/reset-password/{token}"
    body = (
        "<p>We received a request to reset your password.</p>"
        f"{_button(url, 'Reset Password')}"
        "<p><strong>This link will expire in 1 hour.</strong></p>"
        "<p>If you didn't request a reset, you can ignore this email; your password stays unchanged.</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("Password Reset Request"),
        html_body=_render("Password Reset", name, body, accent=AMBER),
        category="password_reset",
    )


def password_changed_email(to: str, name: str) -> Notification:
    body = (
        "<p>Your password has been changed successfully.</p>"
        "<p>If you did not make this change, contact support right away.</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("Password Changed Successfully"),
        html_body=_render("Password Changed", name, body, accent=GREEN),
        category="password_changed",
    )


def account_locked_email(to: str, name: str, unlock_time: datetime) -> Notification:
    body = (
        "<p>Your account has been temporarily locked after too many failed login attempts.</p>"
        f'<div class="box"><p><strong>Unlocks at:</strong> {escape(_format_time(unlock_time))}</p></div>'
        "<p>If this wasn't you, we recommend resetting your password once the lock expires.</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("Account Locked"),
        html_body=_render("Account Locked", name, body, accent=RED),
        category="account_locked",
    )


def resource_approved_email(to: str, name: str, title: str, course_name: str) -> Notification:
    body = (
        "<p>Great news! Your resource has been approved and is now visible to other students.</p>"
        f'<div class="box"><p><strong>Title:</strong> {escape(title)}</p>'
        f"<p><strong>Course:</strong> {escape(course_name)}</p></div>"
        "<p>Thank you for contributing!</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("Your Resource Has Been Approved!"),
        html_body=_render("Resource Approved", name, body, accent=GREEN),
        category="resource_approved",
    )


def resource_rejected_email(to: str, name: str, title: str, course_name: str, reason: str) -> Notification:
    body = (
        "<p>Unfortunately your resource submission was not approved.</p>"
        f'<div class="box"><p><strong>Title:</strong> {escape(title)}</p>'
        f"<p><strong>Course:</strong> {escape(course_name)}</p>"
        f"<p><strong>Reason:</strong> {escape(reason)}</p></div>"
        "<p>You are welcome to submit an improved version.</p>"
    )
    return Notification(
        recipient=to,
        subject=_subject("Resource Submission Update"),
        html_body=_render("Submission Update", name, body, accent=RED),
        category="resource_rejected",
    )


def new_submission_email(
    to: str,
    admin_name: str,
    uploader_name: str,
    title: str,
    course_name: str,
    resource_type: str,
    department: str,
    semester: str
) -> Notification:
    url = f"{settings.FRONTEND_URL}/admin/resources"
    body = (
        f"<p>{escape(uploader_name)} submitted a new resource for review.</p>"
        f'<div class="box"><p><strong>Title:</strong> {escape(title)}</p>'
        f"<p><strong>Course:</strong> {escape(course_name)}</p>"
        f"<p><strong>Type:</strong> {escape(resource_type)}</p>"
        f"<p><strong>Department:</strong> {escape(department)} / {escape(semester)}</p></div>"
        f"{_button(url, 'Review Submissions')}"
    )
    return Notification(
        recipient=to,
        subject=_subject("New Resource Submitted for Approval"),
        html_body=_render("New Submission", admin_name, body),
        category="new_submission",
    )
