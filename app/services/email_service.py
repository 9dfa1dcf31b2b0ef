"""
Email Service - report copies and officer alerts over SMTP.

The Mailer is built once by the application bootstrap (see app.main) and
handed to the services that need it. Without GMAIL_USER/GMAIL_PASS it is
disabled: every send is skipped with a warning and reported as not sent.

Sends never raise. A failed send is logged and returns False so that the
operation that triggered it still succeeds.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Any, Dict, Optional
import logging

import aiosmtplib
from fastapi import Request

from app.core.settings import Settings

logger = logging.getLogger(__name__)


REPORT_EMAIL_TEMPLATE = """
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; border: 1px solid #eee; padding: 20px; border-radius: 10px;">
  <h2 style="color: #10b981;">{app_name} - Report Copy</h2>
  <p>A new civic issue has been reported. Here are the details:</p>
  <table style="width: 100%; border-collapse: collapse;">
    {rows}
  </table>
  <p style="margin-top: 20px; font-size: 12px; color: #666;">
    This is an automated message from {app_name}. Please do not reply to this email.
  </p>
</div>
"""

ROW_TEMPLATE = (
    '<tr><td style="padding: 8px; border-bottom: 1px solid #eee; font-weight: bold;">{label}:</td>'
    '<td style="padding: 8px; border-bottom: 1px solid #eee;">{value}</td></tr>'
)


class Mailer:
    """Async SMTP mailer for report emails."""

    def __init__(
        self,
        username: Optional[str],
        password: Optional[str],
        host: str = "smtp.gmail.com",
        port: int = 587,
        from_name: str = "Madurai Clean 3.0",
        timeout: float = 10.0,
    ):
        self.username = username
        self.password = password
        self.host = host
        self.port = port
        self.from_name = from_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            username=settings.GMAIL_USER,
            password=settings.GMAIL_PASS,
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            from_name=settings.EMAIL_FROM_NAME,
            timeout=settings.SMTP_TIMEOUT,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.username and self.password)

    def render_report_html(self, report_data: Dict[str, Any]) -> str:
        rows = [
            ("Category", report_data.get("category", "")),
            ("Urgency", str(report_data.get("urgency", "")).upper()),
            ("Ward", report_data.get("ward_name", "")),
            ("Description", report_data.get("description") or ""),
            ("Location", f"{report_data.get('lat')}, {report_data.get('lng')}"),
        ]
        rendered = "\n    ".join(
            ROW_TEMPLATE.format(label=label, value=escape(str(value))) for label, value in rows
        )
        return REPORT_EMAIL_TEMPLATE.format(app_name=escape(self.from_name), rows=rendered)

    async def send_report_email(self, to: str, subject: str, report_data: Dict[str, Any]) -> bool:
        """
        Send a report summary email.

        Args:
            to: Recipient address
            subject: Subject line
            report_data: category, urgency, description, lat, lng, ward_name

        Returns:
            True if the SMTP server accepted the message, False otherwise
        """
        if not self.enabled:
            logger.warning("Gmail credentials (GMAIL_USER, GMAIL_PASS) not configured. Skipping email.")
            return False

        message = MIMEMultipart("alternative")
        message["From"] = f'"{self.from_name}" <{self.username}>'
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(self.render_report_html(report_data), "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=True,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPResponseException as e:
            if e.code == 534:
                logger.error(
                    f"Failed to send email to {to}: Gmail requires an App Password. "
                    "Generate one in your Google Account settings and set it as GMAIL_PASS."
                )
            else:
                logger.error(f"Failed to send email to {to}: {e.code} {e.message}")
            return False
        except Exception as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}")
        return True


def get_mailer(request: Request) -> Mailer:
    """FastAPI dependency returning the mailer owned by the application."""
    return request.app.state.mailer
