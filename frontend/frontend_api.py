# frontend/frontend_api.py
from __future__ import annotations

import os
from contextlib import suppress
from typing import Any

import requests

API_BASE = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
TIMEOUT = 30
# Summaries of long transcripts can take a while
SUMMARIZE_TIMEOUT = 120


class ApiCallError(Exception):
    """Non-2xx answer from the API, carrying its ``error`` text."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _full(path: str) -> str:
    """Return an absolute URL for the API, accepting either absolute or relative paths."""
    if path.startswith(("http://", "https://")):
        return path
    return f"{API_BASE.rstrip('/')}/{path.lstrip('/')}"


def post(url: str, *, timeout: int = TIMEOUT, **kwargs: Any) -> requests.Response:
    """POST wrapper that injects the API base and timeout."""
    return requests.post(_full(url), timeout=timeout, **kwargs)


def _json_or_raise(r: requests.Response, fallback: str) -> dict[str, Any]:
    data: dict[str, Any] = {}
    with suppress(ValueError):
        data = r.json()
    if not r.ok or data.get("error"):
        raise ApiCallError(data.get("error") or fallback, r.status_code)
    return data


def upload_transcript(filename: str, content: bytes) -> str:
    r = post("/api/upload-transcript", files={"file": (filename, content)})
    data = _json_or_raise(r, "Failed to process file")
    return data.get("text") or ""


def summarize(transcript: str, custom_instructions: str = "") -> str:
    r = post(
        "/api/summarize",
        json={"transcript": transcript, "customInstructions": custom_instructions},
        timeout=SUMMARIZE_TIMEOUT,
    )
    data = _json_or_raise(r, "Failed to generate summary")
    summary = data.get("summary")
    if not summary:
        raise ApiCallError("No summary received", r.status_code)
    return summary


def send_email(to: str, subject: str, summary: str) -> dict[str, Any]:
    r = post("/api/send-email", json={"to": to, "subject": subject, "summary": summary})
    return _json_or_raise(r, "Failed to send email")
