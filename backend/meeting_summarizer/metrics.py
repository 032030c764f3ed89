from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Callable

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests received by the API.",
    ["path", "method", "status"],
)

HTTP_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Latencies for HTTP requests.",
    ["path", "method"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

TRANSCRIPTS_INGESTED = Counter(
    "transcripts_ingested_total",
    "Uploaded transcripts by detected kind and outcome.",
    ["kind", "outcome"],
)

SUMMARIES_GENERATED = Counter(
    "summaries_generated_total",
    "Summarization calls by outcome.",
    ["outcome"],
)

EMAILS_SENT = Counter(
    "emails_sent_total",
    "Summary emails by provider and outcome.",
    ["provider", "outcome"],
)

METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST


@contextmanager
def track_http_request(
    path: str,
    method: str,
    status_getter: Callable[[], int],
) -> Any:
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        HTTP_REQUESTS.labels(path=path, method=method, status=str(status_getter())).inc()
        HTTP_LATENCY.labels(path=path, method=method).observe(duration)


def render_all_metrics_prometheus() -> bytes:
    """Render the default registry in Prometheus text format."""
    return generate_latest()
