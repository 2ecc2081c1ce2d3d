"""Outgoing account mail.

Delivery transport is not configured; messages are only logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wise_advice.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    to: str
    subject: str
    body: str


class Mailer:
    """Builds account emails and logs them instead of delivering."""

    def __init__(self, sender: str | None = None) -> None:
        self.sender = sender or settings.mail_sender

    def send(self, to: str, subject: str, body: str) -> MailMessage:
        message = MailMessage(to=to, subject=subject, body=body)
        logger.info("Email delivery disabled - would send %r to %s", subject, to)
        return message

    def send_confirmation(self, to: str, login: str, token: str) -> MailMessage:
        """Send the link that confirms a freshly registered address."""
        link = f"{settings.public_base_url}/api/auth/confirm-email/{token}"
        hours = settings.email_confirmation_expire_minutes // 60
        body = (
            f"Hi {login}!\n\n"
            f"Please confirm your email address by opening {link}\n"
            f"The link expires in {hours} hours."
        )
        return self.send(to, "Confirm your Wise Advice account", body)

    def send_password_reset(self, to: str, login: str, token: str) -> MailMessage:
        link = f"{settings.public_base_url}/api/auth/password-reset/{token}"
        body = (
            f"Hi {login}!\n\n"
            f"A password reset was requested for your account. Submit a new password to {link}\n"
            f"The link expires in {settings.password_reset_expire_minutes} minutes. "
            "If you did not ask for this you can ignore this email."
        )
        return self.send(to, "Reset your Wise Advice password", body)


_mailer = Mailer()


def get_mailer() -> Mailer:
    """Return the process-wide mailer."""
    return _mailer
