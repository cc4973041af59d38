from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.salonpos.core.config import settings


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    def __init__(self) -> None:
        self.enabled = bool(settings.METRICS_ENABLED)
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._checkout_sessions_started_total = None
        self._checkout_sessions_completed_total = None
        self._checkout_session_conflict_total = None
        self._checkout_completion_rejected_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._checkout_sessions_started_total = Counter(
            "checkout_sessions_started_total",
            "Checkout sessions started, by origin.",
            ["origin"],
            registry=self._registry,
        )
        self._checkout_sessions_completed_total = Counter(
            "checkout_sessions_completed_total",
            "Checkout sessions completed into an invoice.",
            registry=self._registry,
        )
        self._checkout_session_conflict_total = Counter(
            "checkout_session_conflict_total",
            "Checkout session writes rejected by the version check.",
            registry=self._registry,
        )
        self._checkout_completion_rejected_total = Counter(
            "checkout_completion_rejected_total",
            "Checkout completions rejected by a completion gate.",
            ["code"],
            registry=self._registry,
        )

    def reset(self) -> None:
        if not self.enabled:
            return
        self._initialize_registry()

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def increment_checkout_started(self, origin: str) -> None:
        if not self.enabled:
            return
        self._checkout_sessions_started_total.labels(origin=origin).inc()

    def increment_checkout_completed(self) -> None:
        if not self.enabled:
            return
        self._checkout_sessions_completed_total.inc()

    def increment_session_conflict(self) -> None:
        if not self.enabled:
            return
        self._checkout_session_conflict_total.inc()

    def increment_completion_rejected(self, code: str) -> None:
        if not self.enabled:
            return
        self._checkout_completion_rejected_total.labels(code=code).inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
