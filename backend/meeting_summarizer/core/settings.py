from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Uploads
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # LLM (Groq)
    GROQ_API_KEY: str | None = None
    LLM_MODEL: str = "llama3-70b-8192"
    LLM_TEMPERATURE: float = 0.3
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Email: Resend is preferred, SMTP is the fallback
    RESEND_API_KEY: str | None = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str | None = None
    EMAIL_FROM_NAME: str = "AI Meeting Notes"
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    EMAIL_TIMEOUT_SECONDS: float = 30.0

    @property
    def llm_configured(self) -> bool:
        return bool(self.GROQ_API_KEY and self.GROQ_API_KEY.strip())

    @property
    def email_provider(self) -> str | None:
        """Name of the email transport these settings select, or None."""
        if not self.EMAIL_FROM:
            return None
        if self.RESEND_API_KEY:
            return "resend"
        if self.SMTP_HOST:
            return "smtp"
        return None


def get_settings() -> Settings:
    """
    Build settings at request time so startup never fails on a missing
    credential; the check happens in the handler that needs it.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
