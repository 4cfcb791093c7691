"""
Request observability: correlation ids, request-scoped log context and
Prometheus request metrics.
"""

import time
import uuid

from fastapi import Request
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from resourceplanner.platform.logging import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

REQUEST_COUNT = Counter(
    "resourceplanner_http_requests_total",
    "HTTP requests served",
    ["method", "endpoint", "status"],
)
REQUEST_DURATION = Histogram(
    "resourceplanner_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
)


def _endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded (/resources/{resource_id})
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to the log context and records request metrics."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        bind_request_context(correlation_id, method=request.method, path=request.url.path)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            REQUEST_COUNT.labels(
                method=request.method, endpoint=_endpoint_label(request), status="500"
            ).inc()
            logger.exception("Request failed")
            clear_request_context()
            raise

        endpoint = _endpoint_label(request)
        duration = time.perf_counter() - start
        REQUEST_COUNT.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(duration)
        response.headers[CORRELATION_HEADER] = correlation_id
        logger.debug("Request completed", status_code=response.status_code, duration_seconds=duration)
        clear_request_context()
        return response
