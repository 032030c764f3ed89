from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TranscriptOut(BaseModel):
    text: str


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional at the schema level so a missing transcript reaches the
    # handler and gets the "Transcript is required" message.
    transcript: Optional[str] = None
    custom_instructions: Optional[str] = Field(default=None, alias="customInstructions")


class SummaryOut(BaseModel):
    summary: str


class SendEmailRequest(BaseModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    summary: Optional[str] = None


class EmailSentOut(BaseModel):
    ok: bool = True
    id: Optional[str] = None
    provider: str
