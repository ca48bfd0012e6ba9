"""Shared fixtures for traefik-officer tests."""

from __future__ import annotations

import json

import pytest
from prometheus_client import CollectorRegistry

from traefik_officer.metrics import OfficerMetrics
from traefik_officer.rotation import ProcessHandle


# ── Sample log lines ──────────────────────────────────────────────────

SAMPLE_TEXT_LINES = [
    '192.168.1.100 - - [17/Feb/2026:10:15:30 +0000] "GET /api/v1/users/123?x=1 HTTP/1.1" 200 1234 "-" "Mozilla/5.0" 42 "users@kubernetes" "http://10.0.0.5:8080" 12ms',
    '10.0.0.5 - admin [17/Feb/2026:10:16:00 +0000] "POST /api/login HTTP/1.1" 302 - "http://example.com" "curl/7.68.0" 43 "login@docker" "http://10.0.0.6:80" 250ms',
    '10.0.0.7 - - [17/Feb/2026:10:16:05 +0000] "GET /health HTTP/2.0" 200 2 "-" "kube-probe/1.27" 44 "health@internal" "http://10.0.0.8:9000" 1ms',
]


def text_line(
    path: str = "/api/items",
    method: str = "GET",
    router: str = "items@kubernetes",
    duration: str = "15ms",
    status: str = "200",
) -> str:
    return (
        f'10.0.0.1 - - [17/Feb/2026:10:00:00 +0000] "{method} {path} HTTP/1.1" '
        f'{status} 512 "-" "curl/8.0" 7 "{router}" "http://10.0.0.9:8080" {duration}'
    )


def json_line(**overrides) -> str:
    entry = {
        "ClientHost": "10.0.0.1",
        "StartUTC": "2026-02-17T10:00:00.000000000Z",
        "RouterName": "items@kubernetes",
        "RequestMethod": "GET",
        "RequestPath": "/api/items",
        "RequestProtocol": "HTTP/1.1",
        "OriginStatus": 200,
        "OriginContentSize": 512,
        "RequestCount": 7,
        "Duration": 15_000_000,
        "Overhead": 250_000,
    }
    entry.update(overrides)
    return json.dumps(entry)


class FakeLocator:
    """ProcessLocator that records signals instead of sending them."""

    def __init__(self, pid: int | None = 4242) -> None:
        self.pid = pid
        self.signals: list[tuple[ProcessHandle, int]] = []
        self.lookups: list[str] = []

    def locate(self, name: str) -> ProcessHandle | None:
        self.lookups.append(name)
        if self.pid is None:
            return None
        return ProcessHandle(self.pid, name)

    def signal(self, handle: ProcessHandle, signum: int) -> None:
        self.signals.append((handle, signum))


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    return OfficerMetrics(registry=registry)


@pytest.fixture
def json_metrics(registry):
    return OfficerMetrics(registry=registry, track_overhead=True)


@pytest.fixture
def fake_locator():
    return FakeLocator()


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "accessLog.txt"
    path.write_text("")
    return path
