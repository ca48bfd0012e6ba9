"""Shared types for access log parsers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from traefik_officer.errors import ParseError

logger = logging.getLogger(__name__)


@dataclass
class RequestRecord:
    """One access log line in canonical form. ``duration`` is milliseconds."""

    raw_line: str
    client_host: str = ""
    client_username: str = ""
    start_utc: str = ""
    router_name: str = ""
    request_method: str = ""
    request_path: str = ""
    request_protocol: str = ""
    origin_status: int = 0
    origin_content_size: int = 0
    referrer: str = ""
    user_agent: str = ""
    request_count: int = 0
    service_url: str = ""
    duration: float = 0.0
    overhead: float | None = None
    conversion_errors: list[str] = field(default_factory=list)

    def log_fields(self) -> None:
        logger.debug("ClientHost: %s", self.client_host)
        logger.debug("StartUTC: %s", self.start_utc)
        logger.debug("RouterName: %s", self.router_name)
        logger.debug("RequestMethod: %s", self.request_method)
        logger.debug("RequestPath: %s", self.request_path)
        logger.debug("RequestProtocol: %s", self.request_protocol)
        logger.debug("OriginStatus: %d", self.origin_status)
        logger.debug("OriginContentSize: %d bytes", self.origin_content_size)
        logger.debug("RequestCount: %d", self.request_count)
        logger.debug("Duration: %f ms", self.duration)
        if self.overhead is not None:
            logger.debug("Overhead: %f ms", self.overhead)


class Parser(ABC):
    """Base class for access log parsers."""

    name: str

    @abstractmethod
    def parse_line(self, line: str) -> RequestRecord:
        """Parse a single line. Raises ParseError if the line is unusable."""
        ...

    def parse_file(self, path: Path) -> Iterator[RequestRecord]:
        """Parse all lines in a file, yielding a record for each parseable line."""
        with open(path) as f:
            for line in f:
                try:
                    yield self.parse_line(line.rstrip("\n"))
                except ParseError:
                    continue
