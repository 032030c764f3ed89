# meeting_summarizer/services/emailer.py
from __future__ import annotations

import html
import logging
import re
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol

import httpx

from meeting_summarizer.core.errors import ConfigError, ProviderError, ValidationError
from meeting_summarizer.core.settings import Settings
from meeting_summarizer.logging_utils import get_logger, log_kv
from meeting_summarizer.metrics import EMAILS_SENT

log = get_logger(__name__)

DEFAULT_SUBJECT = "Meeting Summary"

_ADDRESS_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body_text: str

    @property
    def body_html(self) -> str:
        return f"<pre style='white-space:pre-wrap'>{html.escape(self.body_text)}</pre>"


class EmailTransport(Protocol):
    name: str

    def send(self, message: OutgoingEmail) -> Optional[str]: ...


class ResendTransport:
    name = "resend"

    def __init__(
        self,
        api_key: str,
        sender: str,
        *,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 30.0,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._sender = sender
        self._api_url = api_url
        self._timeout = timeout
        self._http_transport = http_transport

    def send(self, message: OutgoingEmail) -> Optional[str]:
        data = {
            "from": self._sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.body_text,
            "html": message.body_html,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        with httpx.Client(timeout=self._timeout, transport=self._http_transport) as client:
            r = client.post(self._api_url, headers=headers, json=data)
        r.raise_for_status()
        return r.json().get("id")


class SmtpTransport:
    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        *,
        user: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._user = user
        self._password = password
        self._timeout = timeout

    def send(self, message: OutgoingEmail) -> Optional[str]:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = self._sender
        msg["To"] = message.to
        msg.set_content(message.body_text, subtype="plain", charset="utf-8")
        msg.add_alternative(message.body_html, subtype="html", charset="utf-8")

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            server.ehlo()
            server.starttls()
            server.ehlo()
            if self._user and self._password:
                server.login(self._user, self._password)
            server.send_message(msg)
        return None


def build_transport(settings: Settings) -> EmailTransport:
    """Pick Resend when it is configured, else SMTP; fail if neither is."""
    provider = settings.email_provider
    sender = formataddr((settings.EMAIL_FROM_NAME, settings.EMAIL_FROM or ""))
    if provider == "resend":
        return ResendTransport(
            settings.RESEND_API_KEY or "",
            sender,
            api_url=settings.RESEND_API_URL,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )
    if provider == "smtp":
        return SmtpTransport(
            settings.SMTP_HOST or "",
            settings.SMTP_PORT,
            sender,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )
    raise ConfigError("Email provider is not configured")


def build_message(to: Optional[str], subject: Optional[str], summary: Optional[str]) -> OutgoingEmail:
    to = (to or "").strip()
    if not to or not summary or not summary.strip():
        raise ValidationError("Recipient and summary are required")
    if not _ADDRESS_RE.match(to):
        raise ValidationError("Invalid recipient email address")
    subject = subject.strip() if subject and subject.strip() else DEFAULT_SUBJECT
    return OutgoingEmail(to=to, subject=subject, body_text=summary)


def send_summary_email(
    to: Optional[str],
    subject: Optional[str],
    summary: Optional[str],
    *,
    settings: Settings,
    transport: Optional[EmailTransport] = None,
) -> tuple[str, Optional[str]]:
    """
    Email ``summary`` to ``to``.

    Returns ``(provider_name, message_id)``; the id is None when the
    provider does not hand one back (SMTP).
    """
    message = build_message(to, subject, summary)
    if transport is None:
        transport = build_transport(settings)

    try:
        message_id = transport.send(message)
    except Exception as exc:
        EMAILS_SENT.labels(provider=transport.name, outcome="failed").inc()
        raise ProviderError("Failed to send email") from exc

    EMAILS_SENT.labels(provider=transport.name, outcome="sent").inc()
    log_kv(
        log,
        logging.INFO,
        "summary email sent",
        provider=transport.name,
        message_id=message_id,
        body_chars=len(message.body_text),
    )
    return transport.name, message_id


__all__ = [
    "DEFAULT_SUBJECT",
    "EmailTransport",
    "OutgoingEmail",
    "ResendTransport",
    "SmtpTransport",
    "build_message",
    "build_transport",
    "send_summary_email",
]
