"""Outbound email over SMTP."""

from email.message import EmailMessage
from typing import Protocol

import aiosmtplib

from ...config import Settings, settings
from ...core.exceptions import ExternalServiceError
from ...core.logging import get_logger

logger = get_logger(__name__)


class Mailer(Protocol):
    async def send(self, to: str, subject: str, body: str) -> None: ...


class SmtpMailer:
    """Plain-text mail through the configured SMTP server."""

    def __init__(self, config: Settings | None = None):
        self.config = config or settings

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.config.mail_from
        message["To"] = to
        message.set_content(body)
        return message

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send one message.

        Raises:
            ExternalServiceError: If the SMTP server rejects or cannot be reached
        """
        try:
            await aiosmtplib.send(
                self._build_message(to, subject, body),
                hostname=self.config.smtp_host,
                port=self.config.smtp_port,
                username=self.config.smtp_username,
                password=self.config.smtp_password,
                use_tls=self.config.smtp_use_tls,
                timeout=self.config.smtp_timeout_seconds,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning("Email delivery failed", extra={"to": to, "error": str(e)})
            raise ExternalServiceError("smtp", "send", {"error": str(e)}) from e
