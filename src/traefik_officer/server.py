"""Pull endpoint for the metric registry."""

from __future__ import annotations

import logging

from prometheus_client import CollectorRegistry, start_http_server

logger = logging.getLogger(__name__)


def serve_metrics(port: int, registry: CollectorRegistry, addr: str = "0.0.0.0"):
    """Serve ``registry`` over HTTP from a daemon thread."""
    server, thread = start_http_server(port, addr=addr, registry=registry)
    logger.info("Serving metrics on http://%s:%d/metrics", addr, port)
    return server, thread
