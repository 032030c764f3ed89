# frontend/session.py
"""
Client-side session state for the summarizer form.

Everything the page knows lives on one ``SummarySession`` kept in
``st.session_state``; nothing survives a full reload. Every user action is a
method that checks the current phase first and raises ``InvalidTransition``
when the action is not allowed, so the UI never has to rely on which buttons
happen to be rendered.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ALLOWED_EXTENSIONS = (".txt", ".doc", ".docx", ".pdf")
DEFAULT_EMAIL_SUBJECT = "Meeting Summary"


class Phase(str, Enum):
    IDLE = "idle"
    PROCESSING_FILE = "processing_file"
    SUMMARIZING = "summarizing"
    SUMMARY_READY = "summary_ready"
    EDITING = "editing"


class InvalidTransition(Exception):
    """An action was requested in a phase that does not allow it."""


@dataclass(frozen=True)
class Notice:
    level: str  # "success" | "error" | "info"
    title: str
    description: str = ""


@dataclass(frozen=True)
class EmailDraft:
    to: str
    subject: str
    summary: str

    def as_payload(self) -> dict[str, str]:
        return {"to": self.to, "subject": self.subject, "summary": self.summary}


@dataclass
class SummarySession:
    transcript: str = ""
    custom_instructions: str = ""
    summary: str = ""
    original_summary: str = ""
    uploaded_filename: str | None = None
    email_recipient: str = ""
    email_subject: str = ""
    email_form_visible: bool = False
    sending_email: bool = False
    phase: Phase = Phase.IDLE
    notices: list[Notice] = field(default_factory=list)
    _resumes_edit: bool = field(default=False, init=False, repr=False)

    # -- helpers ---------------------------------------------------------

    @property
    def has_summary(self) -> bool:
        return bool(self.summary)

    @property
    def is_modified(self) -> bool:
        return self.summary != self.original_summary

    @property
    def is_busy(self) -> bool:
        return self.phase in (Phase.PROCESSING_FILE, Phase.SUMMARIZING)

    @property
    def can_summarize(self) -> bool:
        return bool(self.transcript.strip()) and self.phase in (
            Phase.IDLE,
            Phase.SUMMARY_READY,
            Phase.EDITING,
        )

    def _require(self, *phases: Phase, action: str) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidTransition(f"cannot {action} while {self.phase.value} (allowed: {allowed})")

    def _settle(self) -> None:
        self.phase = Phase.SUMMARY_READY if self.has_summary else Phase.IDLE

    def _notify(self, level: str, title: str, description: str = "") -> None:
        self.notices.append(Notice(level, title, description))

    def pop_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # -- transcript ingestion -------------------------------------------

    def start_upload(self, filename: str) -> None:
        self._require(Phase.IDLE, Phase.SUMMARY_READY, action="upload a file")
        if not filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise InvalidTransition("Please upload a text file (.txt, .doc, .docx, or .pdf)")
        self.uploaded_filename = filename
        self.phase = Phase.PROCESSING_FILE

    def finish_upload(self, text: str) -> None:
        self._require(Phase.PROCESSING_FILE, action="finish an upload")
        if not text:
            self.fail_upload("No text content received from file")
            return
        self.transcript = text
        self._settle()

    def fail_upload(self, message: str) -> None:
        self._require(Phase.PROCESSING_FILE, action="fail an upload")
        self.uploaded_filename = None
        self._notify("error", "Error processing file", message)
        self._settle()

    def clear_upload(self) -> None:
        if self.is_busy:
            raise InvalidTransition("cannot clear the upload while a request is in flight")
        self.uploaded_filename = None
        self.transcript = ""

    # -- summarization ---------------------------------------------------

    def start_summarize(self) -> dict[str, Any]:
        """
        Regenerating from EDITING leaves edit mode. A successful run replaces
        the unsaved edits; a failed one goes back to editing them.
        """
        self._require(Phase.IDLE, Phase.SUMMARY_READY, Phase.EDITING, action="summarize")
        if not self.transcript.strip():
            raise InvalidTransition("cannot summarize an empty transcript")
        self._resumes_edit = self.phase is Phase.EDITING
        self.phase = Phase.SUMMARIZING
        return {"transcript": self.transcript, "customInstructions": self.custom_instructions}

    def finish_summarize(self, summary: str) -> None:
        self._require(Phase.SUMMARIZING, action="finish summarizing")
        self._resumes_edit = False
        self.summary = summary
        self.original_summary = summary
        self.phase = Phase.SUMMARY_READY
        self._notify(
            "success",
            "Summary generated successfully!",
            "Your meeting transcript has been summarized.",
        )

    def fail_summarize(self, message: str) -> None:
        self._require(Phase.SUMMARIZING, action="fail summarizing")
        if self._resumes_edit:
            self._resumes_edit = False
            self.phase = Phase.EDITING
        else:
            self._settle()
        self._notify("error", "Failed to generate summary", message)

    # -- editing ---------------------------------------------------------

    def begin_edit(self) -> None:
        self._require(Phase.SUMMARY_READY, action="edit")
        self.phase = Phase.EDITING

    def update_summary(self, text: str) -> None:
        self._require(Phase.EDITING, action="change the summary")
        self.summary = text

    def save_edit(self) -> None:
        self._require(Phase.EDITING, action="save")
        self.original_summary = self.summary
        self.phase = Phase.SUMMARY_READY
        self._notify("success", "Summary updated!", "Your changes have been saved.")

    def cancel_edit(self) -> None:
        self._require(Phase.EDITING, action="cancel editing")
        self.summary = self.original_summary
        self.phase = Phase.SUMMARY_READY

    def reset_summary(self) -> None:
        self._require(Phase.SUMMARY_READY, action="reset")
        self.summary = self.original_summary
        self._notify("info", "Summary reset", "Summary restored to original version.")

    # -- email -----------------------------------------------------------

    def toggle_email_form(self) -> None:
        if not self.has_summary:
            raise InvalidTransition("there is no summary to share")
        if self.sending_email:
            raise InvalidTransition("cannot toggle the email form while sending")
        self.email_form_visible = not self.email_form_visible

    def close_email_form(self) -> None:
        if self.sending_email:
            raise InvalidTransition("cannot close the email form while sending")
        self.email_form_visible = False

    def start_send(self) -> EmailDraft:
        if not self.email_form_visible:
            raise InvalidTransition("the email form is not open")
        if self.sending_email:
            raise InvalidTransition("an email is already being sent")
        if not self.email_recipient.strip() or not self.summary:
            raise InvalidTransition("a recipient and a summary are required")
        self.sending_email = True
        return EmailDraft(
            to=self.email_recipient.strip(),
            subject=self.email_subject or DEFAULT_EMAIL_SUBJECT,
            summary=self.summary,
        )

    def finish_send(self) -> None:
        if not self.sending_email:
            raise InvalidTransition("no email is being sent")
        recipient = self.email_recipient.strip()
        self.sending_email = False
        self.email_form_visible = False
        self.email_recipient = ""
        self.email_subject = ""
        self._notify("success", "Email sent successfully!", f"Meeting summary sent to {recipient}")

    def fail_send(self, message: str) -> None:
        if not self.sending_email:
            raise InvalidTransition("no email is being sent")
        self.sending_email = False
        self._notify("error", "Failed to send email", message)


__all__ = [
    "ALLOWED_EXTENSIONS",
    "DEFAULT_EMAIL_SUBJECT",
    "EmailDraft",
    "InvalidTransition",
    "Notice",
    "Phase",
    "SummarySession",
]
