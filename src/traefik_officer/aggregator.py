"""Records classified requests into the metric state."""

from __future__ import annotations

from traefik_officer.classifier import Classification
from traefik_officer.metrics import OfficerMetrics
from traefik_officer.parsers.base import RequestRecord


class Aggregator:
    """Single writer of OfficerMetrics.

    Every record handed in counts as processed; drops also count as ignored
    and kept records are observed into the latency histogram.
    """

    def __init__(self, metrics: OfficerMetrics, track_overhead: bool = False) -> None:
        if track_overhead and metrics.overhead is None:
            raise ValueError("track_overhead requires metrics created with track_overhead=True")
        self.metrics = metrics
        self.track_overhead = track_overhead

    def aggregate(self, record: RequestRecord, classification: Classification) -> None:
        self.metrics.lines_processed.inc()

        if not classification.keep:
            self.metrics.lines_ignored.inc()
            return

        labels = self.metrics.latency_labels(
            classification.path, record.request_method, record.router_name,
        )
        self.metrics.latency.labels(**labels).observe(record.duration)

        if self.track_overhead:
            self.metrics.overhead.observe(record.overhead or 0.0)
