from __future__ import annotations

import io
import logging
import re
from enum import Enum
from typing import Callable, Dict, Optional

import docx
import pdfplumber

from meeting_summarizer.core.errors import EmptyDocumentError, ExtractionError, ValidationError
from meeting_summarizer.logging_utils import get_logger, log_kv
from meeting_summarizer.metrics import TRANSCRIPTS_INGESTED

log = get_logger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class DocumentKind(str, Enum):
    PLAIN_TEXT = "plain_text"
    PDF = "pdf"
    WORD = "word"


EXTENSION_KINDS: Dict[str, DocumentKind] = {
    "txt": DocumentKind.PLAIN_TEXT,
    "pdf": DocumentKind.PDF,
    "doc": DocumentKind.WORD,
    "docx": DocumentKind.WORD,
}


def file_extension(filename: str) -> str:
    """Lower-cased text after the last dot ("" when there is none)."""
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def detect_kind(filename: str) -> DocumentKind:
    kind = EXTENSION_KINDS.get(file_extension(filename))
    if kind is None:
        raise ValidationError("Unsupported file type. Please use .txt, .pdf, .doc, or .docx files.")
    return kind


def extract_plain_text(data: bytes) -> str:
    return data.decode("utf-8-sig", errors="replace")


def extract_pdf_text(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def extract_word_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    parts = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            parts.extend(cell.text for cell in row.cells)
    return "\n".join(parts)


# Looked up at call time so tests can swap a single extractor.
EXTRACTORS: Dict[DocumentKind, Callable[[bytes], str]] = {
    DocumentKind.PLAIN_TEXT: extract_plain_text,
    DocumentKind.PDF: extract_pdf_text,
    DocumentKind.WORD: extract_word_text,
}


def normalize_whitespace(text: str) -> str:
    # The final \s+ pass also folds the paragraph breaks produced by the
    # second step, so the result is always a single line.
    text = text.replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def check_upload_size(size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    if size > max_bytes:
        raise ValidationError(f"File size too large. Maximum {max_bytes // (1024 * 1024)}MB allowed.")


def extract_transcript(
    filename: Optional[str],
    data: Optional[bytes],
    *,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> str:
    """
    Turn an uploaded document into normalized transcript text.

    Checks run in a fixed order: presence, size, extension. Only then is an
    extractor chosen, so oversized or unsupported files never reach one.

    Raises:
        ValidationError: no file, file over ``max_bytes`` or unsupported type.
        EmptyDocumentError: the document holds no readable text.
        ExtractionError: the extractor failed (corrupt or protected file).
    """
    if not filename or data is None:
        raise ValidationError("No file provided")

    check_upload_size(len(data), max_bytes)

    kind = detect_kind(filename)
    ext = file_extension(filename)

    log_kv(
        log,
        logging.INFO,
        "extracting transcript",
        upload_name=filename,
        kind=kind.value,
        size_bytes=len(data),
    )

    try:
        text = EXTRACTORS[kind](data)
    except Exception as exc:
        log.exception("document extraction failed", extra={"upload_name": filename, "kind": kind.value})
        TRANSCRIPTS_INGESTED.labels(kind=kind.value, outcome="error").inc()
        raise ExtractionError(
            f"Error reading {ext.upper()} file. "
            "Please ensure the file is not corrupted or password-protected."
        ) from exc

    if not text.strip():
        TRANSCRIPTS_INGESTED.labels(kind=kind.value, outcome="empty").inc()
        raise EmptyDocumentError("The uploaded file appears to be empty or could not be read.")

    cleaned = normalize_whitespace(text)
    TRANSCRIPTS_INGESTED.labels(kind=kind.value, outcome="ok").inc()
    log_kv(log, logging.INFO, "extracted transcript", kind=kind.value, chars=len(cleaned))
    return cleaned


__all__ = [
    "DocumentKind",
    "EXTRACTORS",
    "MAX_UPLOAD_BYTES",
    "check_upload_size",
    "detect_kind",
    "extract_transcript",
    "file_extension",
    "normalize_whitespace",
]
