from __future__ import annotations

import pytest

from meeting_summarizer.core.errors import EmptyDocumentError, ExtractionError, ValidationError
from meeting_summarizer.services import extraction
from meeting_summarizer.services.extraction import (
    DocumentKind,
    check_upload_size,
    detect_kind,
    extract_transcript,
    file_extension,
    normalize_whitespace,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("a\r\nb", "a b"),
        ("para one\n\n\n\n\npara two", "para one para two"),
        ("  lots   of\t\tspace  ", "lots of space"),
        ("line\n\nbreaks\nkept?", "line breaks kept?"),
        ("\n\n\n", ""),
    ],
)
def test_normalize_whitespace_flattens_to_one_line(raw, expected):
    assert normalize_whitespace(raw) == expected


@pytest.mark.parametrize(
    "name,ext",
    [("a.txt", "txt"), ("A.DocX", "docx"), ("x.tar.gz", "gz"), ("noext", ""), ("trailing.", "")],
)
def test_file_extension(name, ext):
    assert file_extension(name) == ext


@pytest.mark.parametrize(
    "name,kind",
    [
        ("a.txt", DocumentKind.PLAIN_TEXT),
        ("a.pdf", DocumentKind.PDF),
        ("a.doc", DocumentKind.WORD),
        ("a.DOCX", DocumentKind.WORD),
    ],
)
def test_detect_kind(name, kind):
    assert detect_kind(name) is kind


def test_detect_kind_rejects_unknown():
    with pytest.raises(ValidationError):
        detect_kind("slides.pptx")


def test_size_is_checked_before_extension():
    with pytest.raises(ValidationError, match="File size too large"):
        extract_transcript("virus.exe", b"x" * 11, max_bytes=10)


def test_missing_file():
    with pytest.raises(ValidationError, match="No file provided"):
        extract_transcript(None, None)
    with pytest.raises(ValidationError, match="No file provided"):
        extract_transcript("", b"data")


def test_extractor_failure_is_chained(monkeypatch):
    cause = ValueError("encrypted")

    def _fail(data: bytes) -> str:
        raise cause

    monkeypatch.setitem(extraction.EXTRACTORS, DocumentKind.WORD, _fail)

    with pytest.raises(ExtractionError) as info:
        extract_transcript("minutes.doc", b"...")
    assert info.value.__cause__ is cause
    assert "DOC file" in info.value.message
    assert info.value.status_code == 500


def test_empty_extraction_is_a_client_error(monkeypatch):
    monkeypatch.setitem(extraction.EXTRACTORS, DocumentKind.PDF, lambda data: " \n\n ")

    with pytest.raises(EmptyDocumentError) as info:
        extract_transcript("scan.pdf", b"%PDF")
    assert info.value.status_code == 400


def test_check_upload_size_boundary():
    check_upload_size(10, max_bytes=10)
    with pytest.raises(ValidationError, match="Maximum 10MB allowed"):
        check_upload_size(10 * 1024 * 1024 + 1)
