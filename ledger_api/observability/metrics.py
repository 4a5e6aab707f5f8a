from __future__ import annotations

from typing import Any

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest


REQUEST_LABELS = ("method", "path", "status")


class ServiceMetrics:
    """Process-wide request and store metrics bound to a private registry.

    One instance is built at startup and handed to the middleware and the
    store gateway. prometheus_client metrics lock internally, so concurrent
    observations never lose updates.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request durations",
            REQUEST_LABELS,
            registry=self.registry,
        )
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            REQUEST_LABELS,
            registry=self.registry,
        )
        self.db_query_duration = Histogram(
            "db_query_duration_seconds",
            "Database query durations",
            registry=self.registry,
        )

    def observe_http_request(self, *, method: str, path: str, status: int, elapsed_s: float) -> None:
        labels = (method, path, str(status))
        self.http_request_duration.labels(*labels).observe(elapsed_s)
        self.http_requests_total.labels(*labels).inc()

    def observe_store_call(self, elapsed_s: float) -> None:
        self.db_query_duration.observe(elapsed_s)

    def render(self) -> bytes:
        return generate_latest(self.registry)

    def snapshot(self) -> dict[str, Any]:
        requests: dict[tuple[str, str, str], float] = {}
        for family in self.http_requests_total.collect():
            for sample in family.samples:
                if not sample.name.endswith("_total"):
                    continue
                key = (sample.labels["method"], sample.labels["path"], sample.labels["status"])
                requests[key] = sample.value

        store_calls = 0.0
        for family in self.db_query_duration.collect():
            for sample in family.samples:
                if sample.name.endswith("_count"):
                    store_calls = sample.value

        return {
            "http_requests_total": requests,
            "db_queries_total": store_calls,
        }
