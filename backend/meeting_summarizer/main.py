from __future__ import annotations

import os
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from meeting_summarizer.api import health as health_api
from meeting_summarizer.core.errors import install_error_handlers
from meeting_summarizer.logging_utils import (
    bind_request_context,
    configure_logging,
    get_logger,
)
from meeting_summarizer.metrics import (
    METRICS_CONTENT_TYPE,
    render_all_metrics_prometheus,
    track_http_request,
)
from meeting_summarizer.routers import email, summaries, transcripts

app = FastAPI(title="AI Meeting Notes Summarizer")

# Configure structured logging for the API once at startup
configure_logging("api", os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

install_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Observability middleware (request ID + HTTP metrics)
# ---------------------------------------------------------------------------


@app.middleware("http")
async def observability_middleware(request: Request, call_next):
    """
    Attach a request_id to logs and the response, and track basic HTTP
    metrics (path/method/status + latency) for every request.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_request_context(request_id)

    status_holder: dict[str, int] = {"status": 500}
    path = request.url.path
    method = request.method

    with track_http_request(path, method, lambda: status_holder["status"]):
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "unhandled error in request",
                extra={"path": path, "method": method},
            )
            raise
        status_holder["status"] = response.status_code

    response.headers["x-request-id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Health + metrics
# ---------------------------------------------------------------------------

app.include_router(health_api.router)


@app.get("/metrics-prom", include_in_schema=False)
def metrics_prometheus() -> Response:
    """Prometheus text-format metrics for scraping and debugging."""
    return Response(content=render_all_metrics_prometheus(), media_type=METRICS_CONTENT_TYPE)


# ---------------------------------------------------------------------------
# API routers
# ---------------------------------------------------------------------------

# Routers declare their own /api prefix.
app.include_router(transcripts.router)
app.include_router(summaries.router)
app.include_router(email.router)
