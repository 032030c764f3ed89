# frontend/streamlit_app.py
from __future__ import annotations

from typing import Any, Callable

import requests
import streamlit as st

import frontend_api as api
from session import ALLOWED_EXTENSIONS, InvalidTransition, Phase, SummarySession

NOTICE_ICONS = {"success": "✅", "error": "⚠️", "info": "↩️"}


# ---------------------------
# UI helpers
# ---------------------------
def _ensure_session_state() -> SummarySession:
    if "session" not in st.session_state:
        st.session_state.session = SummarySession()
    if "uploader_nonce" not in st.session_state:
        st.session_state.uploader_nonce = 0
    if "processed_upload" not in st.session_state:
        st.session_state.processed_upload = None
    return st.session_state.session


def _guarded(action: Callable[[], Any]) -> Any:
    try:
        return action()
    except InvalidTransition as e:
        st.warning(str(e))
        return None


def _show_notices(s: SummarySession) -> None:
    for n in s.pop_notices():
        text = f"**{n.title}** {n.description}".strip()
        st.toast(text, icon=NOTICE_ICONS.get(n.level))


# ---------------------------
# Action callbacks
# ---------------------------
def _clear_upload(s: SummarySession) -> None:
    s.clear_upload()
    st.session_state.transcript_input = ""
    st.session_state.processed_upload = None
    # A fresh key is the only way to empty a file_uploader
    st.session_state.uploader_nonce += 1


def _begin_edit(s: SummarySession) -> None:
    s.begin_edit()
    st.session_state.summary_editor = s.summary


def _save_edit(s: SummarySession) -> None:
    s.update_summary(st.session_state.get("summary_editor", s.summary))
    s.save_edit()


def _send_email(s: SummarySession) -> None:
    s.email_recipient = st.session_state.get("email_recipient_input", "")
    s.email_subject = st.session_state.get("email_subject_input", "")
    draft = s.start_send()
    try:
        api.send_email(**draft.as_payload())
    except (api.ApiCallError, requests.RequestException):
        s.fail_send("Please try again or check your email configuration.")
        return
    s.finish_send()
    st.session_state.email_recipient_input = ""
    st.session_state.email_subject_input = ""


def _process_upload(s: SummarySession, uploaded: Any) -> None:
    marker = f"{uploaded.name}:{uploaded.size}"
    if st.session_state.processed_upload == marker:
        return
    st.session_state.processed_upload = marker

    try:
        s.start_upload(uploaded.name)
    except InvalidTransition as e:
        st.warning(str(e))
        return

    with st.spinner("Processing file..."):
        try:
            text = api.upload_transcript(uploaded.name, uploaded.getvalue())
        except api.ApiCallError as e:
            s.fail_upload(e.message)
            return
        except requests.RequestException:
            s.fail_upload("Please try again or paste the text manually.")
            return
    s.finish_upload(text)
    st.session_state.transcript_input = s.transcript


def _summarize(s: SummarySession) -> None:
    if s.phase == Phase.EDITING:
        # keep the unsaved text in case regenerating fails
        s.update_summary(st.session_state.get("summary_editor", s.summary))
    payload = s.start_summarize()
    with st.spinner("Generating Summary..."):
        try:
            summary = api.summarize(payload["transcript"], payload["customInstructions"])
        except (api.ApiCallError, requests.RequestException):
            s.fail_summarize("Please try again or check your API configuration.")
            return
    s.finish_summarize(summary)


# ---------------------------
# Sections
# ---------------------------
def _transcript_section(s: SummarySession) -> None:
    with st.container(border=True):
        st.subheader("⬆️ Meeting Transcript")

        up_col, clear_col = st.columns([6, 1])
        uploaded = up_col.file_uploader(
            "Upload Transcript File",
            type=[ext.lstrip(".") for ext in ALLOWED_EXTENSIONS],
            key=f"transcript_uploader_{st.session_state.uploader_nonce}",
            disabled=s.phase == Phase.PROCESSING_FILE,
        )
        if uploaded is not None:
            _process_upload(s, uploaded)
        if s.uploaded_filename:
            clear_col.button(
                "✖",
                help=f"Clear {s.uploaded_filename}",
                on_click=lambda: _guarded(lambda: _clear_upload(s)),
            )

        st.caption("or")

        if "transcript_input" not in st.session_state:
            st.session_state.transcript_input = s.transcript
        s.transcript = st.text_area(
            "Paste your meeting transcript here",
            key="transcript_input",
            height=200,
            placeholder="Enter the meeting transcript you'd like to summarize...",
        )
        s.custom_instructions = st.text_area(
            "Custom Instructions (Optional)",
            key="instructions_input",
            height=90,
            placeholder="e.g., Focus on action items and key decisions, include deadlines...",
        )

        if st.button("Generate Summary", disabled=not s.can_summarize, use_container_width=True):
            _guarded(lambda: _summarize(s))


def _summary_section(s: SummarySession) -> None:
    if not s.has_summary:
        return

    with st.container(border=True):
        title_col, actions_col = st.columns([3, 2])
        title_col.subheader("Meeting Summary")

        a1, a2 = actions_col.columns(2)
        if s.phase == Phase.EDITING:
            a1.button("💾 Save", on_click=lambda: _guarded(lambda: _save_edit(s)))
            a2.button("✖ Cancel", on_click=lambda: _guarded(s.cancel_edit))
            st.text_area(
                "Edit summary",
                key="summary_editor",
                height=300,
                placeholder="Edit your meeting summary here...",
                label_visibility="collapsed",
            )
        else:
            a1.button(
                "✏️ Edit",
                disabled=s.phase != Phase.SUMMARY_READY,
                on_click=lambda: _guarded(lambda: _begin_edit(s)),
            )
            if s.is_modified:
                a2.button("↩️ Reset", on_click=lambda: _guarded(s.reset_summary))
            with st.container(border=True):
                st.markdown(s.summary)

        st.divider()
        st.button(
            "📤 Share via Email",
            disabled=s.sending_email,
            on_click=lambda: _guarded(s.toggle_email_form),
        )


def _email_section(s: SummarySession) -> None:
    if not (s.email_form_visible and s.has_summary):
        return

    with st.container(border=True):
        st.subheader("Share Summary via Email")
        st.text_input("Recipient Email", key="email_recipient_input", placeholder="colleague@company.com")
        st.text_input("Subject Line", key="email_subject_input", placeholder="Meeting Summary - [Date/Topic]")

        c1, c2 = st.columns([1, 1])
        c1.button(
            "Sending..." if s.sending_email else "📤 Send Email",
            disabled=s.sending_email or not st.session_state.get("email_recipient_input"),
            on_click=lambda: _guarded(lambda: _send_email(s)),
        )
        c2.button(
            "Cancel",
            disabled=s.sending_email,
            on_click=lambda: _guarded(s.close_email_form),
        )


# ---------------------------
# App
# ---------------------------
def main() -> None:
    st.set_page_config(page_title="AI Meeting Notes Summarizer", page_icon="📝", layout="centered")
    s = _ensure_session_state()

    st.title("📝 AI Meeting Notes Summarizer")
    st.caption("Transform transcripts into actionable insights")

    _transcript_section(s)
    _summary_section(s)
    _email_section(s)

    _show_notices(s)


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    main()
