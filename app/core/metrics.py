"""
Prometheus metrics for the HTTP layer and balance synchronization.

Collectors live in the default registry, so they are process-wide.
"""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.responses import Response

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "HTTP requests handled",
    ["method", "status"],
)
HTTP_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method"],
)
PTO_SYNCS = Counter(
    "pto_balance_syncs_total",
    "PTO balance recomputations",
    ["outcome"],
)


def record_request(method: str, status_code: int, elapsed_seconds: float):
    HTTP_REQUESTS.labels(method=method, status=str(status_code)).inc()
    HTTP_LATENCY.labels(method=method).observe(elapsed_seconds)


def record_sync(succeeded: bool):
    PTO_SYNCS.labels(outcome="success" if succeeded else "failure").inc()


def get_metrics_response() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
