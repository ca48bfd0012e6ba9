"""Parser for Traefik's text (common log format) access log.

Format:
  host - user [start] "method path proto" status size "referrer" "ua" count "router" "url" 12ms
"""

from __future__ import annotations

import logging
import re

from traefik_officer.errors import ConversionError, ParseError
from traefik_officer.parsers.base import Parser, RequestRecord
from traefik_officer.parsers.registry import TEXT_FORMAT, ParserRegistry

logger = logging.getLogger(__name__)

# Same field layout as traefik's pkg/middlewares/accesslog/parser.go
_ACCESS_PATTERN = re.compile(
    r'(\S+)'                    # 1 - ClientHost
    r'\s-\s'
    r'(\S+)\s'                  # 2 - ClientUsername
    r'\[([^\]]+)\]\s'           # 3 - StartUTC
    r'"(\S*)\s?'                # 4 - RequestMethod
    r'((?:[^"\\]|\\.)*)\s'      # 5 - RequestPath
    r'([^"]*)"\s'               # 6 - RequestProtocol
    r'(\S+)\s'                  # 7 - OriginStatus
    r'(\S+)\s'                  # 8 - OriginContentSize
    r'("?\S+"?)\s'              # 9 - Referrer
    r'("\S+")\s'                # 10 - User-Agent
    r'(\S+)\s'                  # 11 - RequestCount
    r'("[^"]*"|-)\s'            # 12 - RouterName
    r'("[^"]*"|-)\s'            # 13 - ServiceURL
    r'(\S+)'                    # 14 - Duration
)


def _to_int(value: str, field_name: str, errors: list[str]) -> int:
    if value == "-":
        return 0
    try:
        return int(value)
    except ValueError:
        errors.append(field_name)
        return 0


def _to_duration(value: str) -> float:
    latency = value.strip("ms")
    try:
        return float(latency)
    except ValueError:
        raise ConversionError(f"Error converting {latency!r} to float") from None


@ParserRegistry.register(TEXT_FORMAT)
class TextLogParser(Parser):
    """Parser for the text access log grammar. Duration is already in ms."""

    name = "text"

    def parse_line(self, line: str) -> RequestRecord:
        m = _ACCESS_PATTERN.search(line)
        if not m:
            logger.warning("Line not in access log format: %s", line)
            raise ParseError("line does not match the access log grammar")

        errors: list[str] = []
        record = RequestRecord(
            raw_line=line,
            client_host=m.group(1),
            client_username=m.group(2),
            start_utc=m.group(3),
            request_method=m.group(4),
            request_path=m.group(5),
            request_protocol=m.group(6),
            origin_status=_to_int(m.group(7), "OriginStatus", errors),
            origin_content_size=_to_int(m.group(8), "OriginContentSize", errors),
            referrer=m.group(9),
            user_agent=m.group(10),
            request_count=_to_int(m.group(11), "RequestCount", errors),
            router_name=m.group(12).strip('\\"'),
            service_url=m.group(13),
        )

        try:
            record.duration = _to_duration(m.group(14))
        except ConversionError as e:
            errors.append("Duration")
            logger.debug("%s", e)

        if errors:
            logger.warning("Unconvertible fields %s in line: %s", errors, line)
        record.conversion_errors = errors
        record.log_fields()
        return record
