# meeting_summarizer/services/summarize.py
from __future__ import annotations

import logging
from typing import Optional, Protocol

from groq import Groq

from meeting_summarizer.core.errors import ConfigError, ProviderError, ValidationError
from meeting_summarizer.core.settings import Settings
from meeting_summarizer.logging_utils import get_logger, log_kv
from meeting_summarizer.metrics import SUMMARIES_GENERATED

log = get_logger(__name__)

SUMMARY_SYSTEM_PROMPT = """You are an expert meeting summarizer. Your task is to create clear, actionable summaries of meeting transcripts.

Default format:
- **Key Discussion Points**: Main topics covered
- **Decisions Made**: Concrete decisions and outcomes
- **Action Items**: Who needs to do what and by when
- **Next Steps**: Follow-up meetings or processes

Keep the summary concise but comprehensive. Focus on actionable insights and important details."""


class CompletionClient(Protocol):
    def complete(self, *, system: str, prompt: str, model: str, temperature: float) -> str: ...


class GroqCompletionClient:
    """Thin wrapper over the Groq chat-completions endpoint."""

    def __init__(self, api_key: str, timeout: float | None = None) -> None:
        self._client = Groq(api_key=api_key, timeout=timeout)

    def complete(self, *, system: str, prompt: str, model: str, temperature: float) -> str:
        r = self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
        )
        return r.choices[0].message.content or ""


def build_user_prompt(transcript: str, custom_instructions: Optional[str] = None) -> str:
    if custom_instructions and custom_instructions.strip():
        return (
            "Please summarize this meeting transcript with the following specific "
            f"instructions: {custom_instructions}\n\nMeeting Transcript:\n{transcript}"
        )
    return f"Please summarize this meeting transcript:\n\n{transcript}"


def summarize_transcript(
    transcript: Optional[str],
    custom_instructions: Optional[str],
    *,
    settings: Settings,
    client: Optional[CompletionClient] = None,
) -> str:
    """
    Summarize ``transcript`` with one model call and return the text as-is.

    The credential check runs before any client exists, so a missing key
    never reaches the network.
    """
    if not transcript or not transcript.strip():
        raise ValidationError("Transcript is required")

    if not settings.llm_configured:
        raise ConfigError("GROQ_API_KEY environment variable is not set")

    if client is None:
        client = GroqCompletionClient(settings.GROQ_API_KEY or "", timeout=settings.LLM_TIMEOUT_SECONDS)

    prompt = build_user_prompt(transcript, custom_instructions)
    try:
        text = client.complete(
            system=SUMMARY_SYSTEM_PROMPT,
            prompt=prompt,
            model=settings.LLM_MODEL,
            temperature=settings.LLM_TEMPERATURE,
        )
    except Exception as exc:
        SUMMARIES_GENERATED.labels(outcome="error").inc()
        raise ProviderError("Failed to generate summary") from exc

    SUMMARIES_GENERATED.labels(outcome="ok").inc()
    log_kv(
        log,
        logging.INFO,
        "summary generated",
        model=settings.LLM_MODEL,
        transcript_chars=len(transcript),
        summary_chars=len(text),
        custom_instructions=bool(custom_instructions and custom_instructions.strip()),
    )
    return text


__all__ = [
    "CompletionClient",
    "GroqCompletionClient",
    "SUMMARY_SYSTEM_PROMPT",
    "build_user_prompt",
    "summarize_transcript",
]
