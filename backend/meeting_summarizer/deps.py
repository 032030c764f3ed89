# meeting_summarizer/deps.py
from __future__ import annotations

from typing import Optional

from meeting_summarizer.services.emailer import EmailTransport
from meeting_summarizer.services.summarize import CompletionClient


def get_completion_client() -> Optional[CompletionClient]:
    """
    Provider client for /api/summarize.

    None means "build a Groq client from settings once the credential check
    has passed". Tests override this dependency with a recording fake.
    """
    return None


def get_email_transport() -> Optional[EmailTransport]:
    """Email transport for /api/send-email; None selects one from settings."""
    return None


__all__ = ["get_completion_client", "get_email_transport"]
