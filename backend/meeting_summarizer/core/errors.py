# meeting_summarizer/core/errors.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from meeting_summarizer.logging_utils import current_request_id, get_logger

log = get_logger(__name__)


class ErrorOut(BaseModel):
    error: str


class SummarizerError(Exception):
    """Base for every error the API turns into an ``{"error": ...}`` body."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SummarizerError):
    """Bad or missing input."""

    status_code = HTTP_400_BAD_REQUEST


class ConfigError(SummarizerError):
    """A required credential or setting is absent."""


class ExtractionError(SummarizerError):
    """A document could not be turned into text."""


class EmptyDocumentError(ExtractionError):
    status_code = HTTP_400_BAD_REQUEST


class ProviderError(SummarizerError):
    """A downstream API (LLM or email) failed."""


def error_response(status_code: int, message: str) -> JSONResponse:
    payload = ErrorOut(error=message).model_dump()
    return JSONResponse(status_code=status_code, content=payload)


async def summarizer_error_handler(request: Request, exc: SummarizerError) -> JSONResponse:
    extra = {
        "path": request.url.path,
        "status": exc.status_code,
        "error_type": type(exc).__name__,
    }
    if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        # exc_info carries the chained provider/extractor cause
        log.error(exc.message, extra=extra, exc_info=exc)
    else:
        log.warning(exc.message, extra=extra)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    log.warning("HTTPException", extra={"path": request.url.path, "status": exc.status_code})
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning("ValidationError", extra={"path": request.url.path, "details": exc.errors()})
    return error_response(HTTP_400_BAD_REQUEST, "Request validation failed")


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled exception", extra={"path": request.url.path}, exc_info=exc)
    response = error_response(HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")
    # runs outside the observability middleware, which never sees this response
    rid = current_request_id()
    if rid:
        response.headers["x-request-id"] = rid
    return response


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SummarizerError, summarizer_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


__all__ = [
    "ConfigError",
    "EmptyDocumentError",
    "ErrorOut",
    "ExtractionError",
    "ProviderError",
    "SummarizerError",
    "ValidationError",
    "install_error_handlers",
]
