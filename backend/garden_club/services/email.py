"""Outgoing email: SMTP transport and the care reminder template."""
import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional, Protocol

from garden_club.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class Mailer(Protocol):
    def send(self, to: str, subject: str, html_body: str) -> SendResult: ...


class SmtpMailer:
    """Sends HTML mail through the configured SMTP relay, one connection per message."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def send(self, to: str, subject: str, html_body: str) -> SendResult:
        settings = self.settings
        if not settings.email_enabled or not settings.smtp_host:
            logger.warning("Email disabled, not sending '%s' to %s", subject, to)
            return SendResult(success=False, error="email disabled")

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = formataddr((settings.club_name, settings.email_from))
        msg["To"] = to
        msg["Message-ID"] = make_msgid(domain=settings.email_from.split("@")[-1])
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
                if settings.smtp_starttls:
                    server.starttls()
                if settings.smtp_user:
                    server.login(settings.smtp_user, settings.smtp_password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email to {to}: {e}")
            return SendResult(success=False, error=str(e))

        logger.info(f"Email sent: {msg['Message-ID']}")
        return SendResult(success=True, message_id=msg["Message-ID"])


def get_mailer() -> Mailer:
    return SmtpMailer()


def reminder_subject(plant_name: str, task_type: str, is_today: bool) -> str:
    when = "Today" if is_today else "Tomorrow"
    return f"Reminder: {task_type} {plant_name} {when}"


def render_reminder(
    user_name: str,
    plant_name: str,
    task_type: str,
    is_today: bool,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    club = html.escape(settings.club_name)
    dashboard_url = html.escape(f"{settings.app_base_url.rstrip('/')}/dashboard", quote=True)
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #22c55e;">{club}</h2>
      <p>Hello {html.escape(user_name)},</p>
      <p>This is a friendly reminder that you are assigned to
        <strong>{html.escape(task_type.lower())}</strong> for
        <strong>{html.escape(plant_name)}</strong> {"today" if is_today else "tomorrow"}.</p>
      <p>Please don't forget to check in on the plant and record your activity on our platform.</p>
      <div style="margin: 30px 0;">
        <a href="{dashboard_url}" style="background-color: #22c55e; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">Go to Dashboard</a>
      </div>
      <p>Thank you for your contribution to our gardening club!</p>
      <p>Best regards,<br>{club}</p>
    </div>
    """


def send_reminder_email(
    mailer: Mailer,
    to: str,
    user_name: str,
    plant_name: str,
    task_type: str,
    is_today: bool,
) -> SendResult:
    subject = reminder_subject(plant_name, task_type, is_today)
    return mailer.send(to, subject, render_reminder(user_name, plant_name, task_type, is_today))
