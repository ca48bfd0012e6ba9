"""Prometheus collectors holding the exporter's metric state.

Metric names and label sets are shared with existing dashboards and
recording rules, so they must not change.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram, Summary

# Milliseconds
LATENCY_BUCKETS = (0, 1, 5, 10, 25, 50, 100, 250, 500, 1000, 2000, 5000, 10000)

LATENCY_LABELS = ("RequestPath", "RequestMethod")
ROUTER_LABEL = "RouterName"


class OfficerMetrics:
    """Metric collectors bound to one CollectorRegistry.

    prometheus_client collectors lock internally, so the pipeline thread can
    update them while the HTTP exporter thread reads snapshots.

    Args:
        registry: Registry to register into. A fresh one is created if None.
        include_router: Add a ``RouterName`` label to the latency histogram.
        track_overhead: Register the overhead summary (JSON logs only).
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        include_router: bool = False,
        track_overhead: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.include_router = include_router

        self.lines_processed = Counter(
            "traefik_officer_lines_processed",
            "Number of access log lines processed",
            registry=self.registry,
        )
        self.lines_ignored = Counter(
            "traefik_officer_lines_ignored",
            "Number of access log lines ignored from latency metrics",
            registry=self.registry,
        )

        labels = LATENCY_LABELS + ((ROUTER_LABEL,) if include_router else ())
        self.latency = Histogram(
            "traefik_officer_latency",
            "Latency metrics per service / endpoint",
            labelnames=labels,
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )

        self.overhead: Summary | None = None
        if track_overhead:
            self.overhead = Summary(
                "traefik_officer_overhead",
                "The overhead caused by traefik processing of requests",
                registry=self.registry,
            )

    def latency_labels(self, path: str, method: str, router: str) -> dict[str, str]:
        labels = {"RequestPath": path, "RequestMethod": method}
        if self.include_router:
            labels[ROUTER_LABEL] = router
        return labels
