from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Ensure repo-root imports work ("meeting_summarizer.*" and "frontend.*")
ROOT = Path(__file__).resolve().parents[1]
for p in (ROOT / "backend", ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from meeting_summarizer.core.settings import Settings  # noqa: E402
from meeting_summarizer.deps import get_completion_client, get_email_transport  # noqa: E402
from meeting_summarizer.main import app  # noqa: E402


# -----------------------------------------------------------------------------
# Environment isolation
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """
    Start every test with no provider credentials and no stray .env file,
    so each test opts in to exactly the configuration it needs.
    """
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


# -----------------------------------------------------------------------------
# Provider fakes
# -----------------------------------------------------------------------------


class FakeCompletionClient:
    def __init__(self, reply: str = "**Key Discussion Points**\n- Q3 roadmap\n") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    def complete(self, *, system: str, prompt: str, model: str, temperature: float) -> str:
        self.calls.append({"system": system, "prompt": prompt, "model": model, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeEmailTransport:
    name = "fake"

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.sent: list[Any] = []

    def send(self, message):
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return f"msg-{len(self.sent)}"


# -----------------------------------------------------------------------------
# Test client + helpers
# -----------------------------------------------------------------------------


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def fake_llm():
    fake = FakeCompletionClient()
    app.dependency_overrides[get_completion_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_completion_client, None)


@pytest.fixture()
def fake_mailer():
    fake = FakeEmailTransport()
    app.dependency_overrides[get_email_transport] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_email_transport, None)


@pytest.fixture()
def groq_key(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk_test_secret_value")
    return "gsk_test_secret_value"
