from __future__ import annotations

import pytest

from meeting_summarizer.core.errors import ConfigError
from meeting_summarizer.core.settings import Settings
from meeting_summarizer.services import summarize as summarize_service
from meeting_summarizer.services.summarize import SUMMARY_SYSTEM_PROMPT, build_user_prompt

URL = "/api/summarize"
TRANSCRIPT = "Alice and Bob discussed Q3 roadmap. Bob will send budget by Friday."


def test_summarize_returns_provider_text_verbatim(client, fake_llm, groq_key):
    fake_llm.reply = "  **Key Discussion Points**\n- Q3 roadmap\n\n**Action Items**\n- Bob: budget by Friday\n"

    r = client.post(URL, json={"transcript": TRANSCRIPT})
    assert r.status_code == 200
    assert r.json() == {"summary": fake_llm.reply}

    assert len(fake_llm.calls) == 1
    call = fake_llm.calls[0]
    assert call["system"] == SUMMARY_SYSTEM_PROMPT
    assert TRANSCRIPT in call["prompt"]
    assert call["prompt"] == f"Please summarize this meeting transcript:\n\n{TRANSCRIPT}"
    assert call["model"] == "llama3-70b-8192"
    assert call["temperature"] == pytest.approx(0.3)


def test_system_prompt_lists_summary_sections():
    for section in ("Key Discussion Points", "Decisions Made", "Action Items", "Next Steps"):
        assert section in SUMMARY_SYSTEM_PROMPT


def test_custom_instructions_precede_transcript(client, fake_llm, groq_key):
    r = client.post(
        URL,
        json={"transcript": TRANSCRIPT, "customInstructions": "Focus only on deadlines"},
    )
    assert r.status_code == 200

    prompt = fake_llm.calls[0]["prompt"]
    assert "Focus only on deadlines" in prompt
    assert TRANSCRIPT in prompt
    assert prompt.index("Focus only on deadlines") < prompt.index(TRANSCRIPT)
    assert prompt.endswith(f"Meeting Transcript:\n{TRANSCRIPT}")


def test_snake_case_instructions_are_accepted(client, fake_llm, groq_key):
    client.post(URL, json={"transcript": TRANSCRIPT, "custom_instructions": "Use bullet points"})
    assert "Use bullet points" in fake_llm.calls[0]["prompt"]


@pytest.mark.parametrize("instructions", [None, "", "   "])
def test_blank_instructions_use_plain_framing(instructions):
    assert build_user_prompt("T", instructions) == "Please summarize this meeting transcript:\n\nT"


@pytest.mark.parametrize("body", [{}, {"transcript": ""}, {"transcript": "   \n"}, {"transcript": None}])
def test_missing_transcript_is_rejected(client, fake_llm, groq_key, body):
    r = client.post(URL, json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Transcript is required"}
    assert fake_llm.calls == []


def test_missing_credential_short_circuits(client, fake_llm):
    r = client.post(URL, json={"transcript": TRANSCRIPT})
    assert r.status_code == 500
    assert r.json() == {"error": "GROQ_API_KEY environment variable is not set"}
    assert len(fake_llm.calls) == 0


def test_missing_credential_never_builds_a_client(monkeypatch):
    built: list[str] = []

    class _Recorder:
        def __init__(self, api_key, timeout=None):
            built.append(api_key)

    monkeypatch.setattr(summarize_service, "GroqCompletionClient", _Recorder)

    with pytest.raises(ConfigError):
        summarize_service.summarize_transcript(TRANSCRIPT, None, settings=Settings())
    assert built == []


def test_groq_client_built_from_settings(monkeypatch, groq_key):
    built: list[tuple[str, float | None]] = []

    class _Recorder:
        def __init__(self, api_key, timeout=None):
            built.append((api_key, timeout))

        def complete(self, *, system, prompt, model, temperature):
            return "ok"

    monkeypatch.setattr(summarize_service, "GroqCompletionClient", _Recorder)
    monkeypatch.setenv("LLM_MODEL", "llama-3.3-70b-versatile")

    out = summarize_service.summarize_transcript(TRANSCRIPT, None, settings=Settings())
    assert out == "ok"
    assert built == [(groq_key, 60.0)]


def test_provider_failure_is_wrapped_without_secrets(client, fake_llm, groq_key):
    fake_llm.error = RuntimeError(f"401 invalid api key {groq_key}")

    r = client.post(URL, json={"transcript": TRANSCRIPT})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to generate summary"}
    assert groq_key not in r.text


def test_malformed_body_is_a_validation_error(client, fake_llm, groq_key):
    r = client.post(URL, content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()
    assert fake_llm.calls == []


def test_model_and_temperature_follow_settings(client, fake_llm, groq_key, monkeypatch):
    monkeypatch.setenv("LLM_MODEL", "mixtral-8x7b-32768")
    monkeypatch.setenv("LLM_TEMPERATURE", "0.1")

    client.post(URL, json={"transcript": TRANSCRIPT})
    assert fake_llm.calls[0]["model"] == "mixtral-8x7b-32768"
    assert fake_llm.calls[0]["temperature"] == pytest.approx(0.1)
