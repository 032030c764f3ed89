from __future__ import annotations

from fastapi import APIRouter, Depends

from meeting_summarizer.core.settings import Settings, get_settings

router = APIRouter(tags=["health"])


def _check_llm(settings: Settings) -> dict:
    if not settings.llm_configured:
        return {"status": "not_configured", "detail": "GROQ_API_KEY not set"}
    return {"status": "ok", "model": settings.LLM_MODEL}


def _check_email(settings: Settings) -> dict:
    provider = settings.email_provider
    if provider is None:
        return {"status": "not_configured", "detail": "no Resend or SMTP settings"}
    return {"status": "ok", "provider": provider}


@router.get("/healthz", include_in_schema=False)
def healthz(settings: Settings = Depends(get_settings)) -> dict:
    """
    Liveness plus a configuration report.

    Missing credentials are reported, never fatal: the affected endpoint
    answers with a ConfigError instead.
    """
    checks = {
        "llm": _check_llm(settings),
        "email": _check_email(settings),
    }
    return {"status": "ok", "env": settings.APP_ENV, "checks": checks}
