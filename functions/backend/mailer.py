"""
Transactional e-mail delivery through the Resend REST API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

from backend import email_templates

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_SENDER = "NeedYou <noreply@need-you.xyz>"
REQUEST_TIMEOUT_SECONDS = 12


class MailerError(Exception):
    pass


class MailerNotConfiguredError(MailerError):
    pass


class Mailer(Protocol):
    def send(self, to: str, subject: str, html: str) -> str:
        """Sends an HTML e-mail and returns the provider's message id."""
        ...


def send_verification_email(
    mailer: Mailer, email: str, verification_link: str, user_name: Optional[str]
) -> str:
    return mailer.send(
        email,
        email_templates.VERIFICATION_SUBJECT,
        email_templates.render_verification_email(user_name, verification_link),
    )


def send_password_reset_email(
    mailer: Mailer, email: str, reset_link: str, user_name: Optional[str]
) -> str:
    return mailer.send(
        email,
        email_templates.PASSWORD_RESET_SUBJECT,
        email_templates.render_password_reset_email(user_name, reset_link),
    )


@dataclass
class ResendMailer:
    api_key: Optional[str]
    sender: str = DEFAULT_SENDER

    def send(self, to: str, subject: str, html: str) -> str:
        if not self.api_key:
            raise MailerNotConfiguredError(
                "Email service not configured. Please contact support."
            )
        try:
            response = requests.post(
                RESEND_API_URL,
                json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.exception("Resend request failed")
            raise MailerError("Failed to send email") from e

        if not response.ok:
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            logger.warning("Resend rejected e-mail (HTTP %s): %s", response.status_code, message)
            raise MailerError(message or "Failed to send email")

        message_id = response.json().get("id")
        logger.info("Sent '%s' e-mail, id %s", subject, message_id)
        return message_id


@dataclass
class InMemoryMailer:
    """Test double that records sent e-mails."""

    sent: list[dict] = field(default_factory=list)

    def send(self, to: str, subject: str, html: str) -> str:
        message_id = f"email_{len(self.sent) + 1}"
        self.sent.append({"id": message_id, "to": to, "subject": subject, "html": html})
        return message_id
