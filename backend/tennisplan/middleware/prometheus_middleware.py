"""
HTTP request metrics.

Records duration, count and in-flight requests per method, normalised
path and status code.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.ulid_helper import is_valid_ulid
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..utils.time_utils import MONTH_REGEX

METRICS_PATH = "/metrics/prometheus"


def _path_label(segment: str) -> str:
    if is_valid_ulid(segment):
        return ":id"
    if MONTH_REGEX.fullmatch(segment):
        return ":month"
    return segment


def normalize_path(raw_path: str) -> str:
    """
    Replace record ids and billing months so label cardinality stays bounded.

    /api/v1/billing/2024-06/players/01HZX3.../invoice
    -> /api/v1/billing/:month/players/:id/invoice
    """
    return "/".join(_path_label(segment) for segment in raw_path.split("/"))


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)
        prometheus_metrics.track_http_request_start(method, path)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            prometheus_metrics.record_http_request(
                method=method,
                endpoint=path,
                duration=time.perf_counter() - started,
                status_code=response.status_code,
            )
            return response
        finally:
            prometheus_metrics.track_http_request_end(method, path)
