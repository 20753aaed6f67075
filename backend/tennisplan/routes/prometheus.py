"""
Prometheus scrape endpoint.

Unauthenticated and unversioned at ``/metrics/prometheus``. Serves the HTTP
metrics of PrometheusMiddleware and the service-operation metrics recorded
by ``BaseService.measure_operation``. Back-to-back scrapes within one second
get the same payload.
"""

import os
from time import monotonic
from typing import Optional, Tuple

from fastapi import APIRouter, Query, Response
from prometheus_client import Counter

from ..core.config import settings
from ..monitoring.prometheus_metrics import REGISTRY, prometheus_metrics

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

scrapes_total = Counter(
    "tennisplan_prometheus_scrapes_total",
    "Scrapes of the metrics endpoint",
    registry=REGISTRY,
)


class PayloadCache:
    def __init__(self, ttl_seconds: float):
        self.ttl_seconds = ttl_seconds
        self._entry: Optional[Tuple[float, bytes]] = None

    @staticmethod
    def enabled() -> bool:
        if settings.is_testing or settings.environment.strip().lower() == "test":
            return False
        return os.getenv("PROMETHEUS_DISABLE_CACHE", "0").lower() not in {"1", "true", "yes"}

    def get(self, refresh: bool = False) -> bytes:
        if not self.enabled():
            return prometheus_metrics.get_metrics()
        now = monotonic()
        if not refresh and self._entry is not None and now - self._entry[0] < self.ttl_seconds:
            return self._entry[1]
        payload = prometheus_metrics.get_metrics()
        self._entry = (now, payload)
        return payload


payload_cache = PayloadCache(ttl_seconds=1.0)


@router.get("/metrics/prometheus", include_in_schema=False, response_class=Response, response_model=None)
def get_prometheus_metrics(refresh: bool = Query(False, description="Bypass the one second cache")) -> Response:
    scrapes_total.inc()
    return Response(
        content=payload_cache.get(refresh=refresh),
        media_type=prometheus_metrics.get_content_type(),
        headers=NO_CACHE_HEADERS,
    )
