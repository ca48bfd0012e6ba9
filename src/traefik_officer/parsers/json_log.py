"""Parser for Traefik's JSON access log (one object per line).

Duration and Overhead are written in nanoseconds and converted to ms.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from traefik_officer.errors import ParseError
from traefik_officer.parsers.base import Parser, RequestRecord
from traefik_officer.parsers.registry import JSON_FORMAT, ParserRegistry

logger = logging.getLogger(__name__)

NANOSECONDS_PER_MILLISECOND = 1_000_000


def _get_str(entry: dict[str, Any], key: str) -> str:
    value = entry.get(key)
    return "" if value is None else str(value)


def _get_number(entry: dict[str, Any], key: str, errors: list[str]) -> float | None:
    """Finite numeric value of ``key``; None (and a recorded error) otherwise."""
    value = entry.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(key)
        return None
    try:
        number = float(value)
    except OverflowError:
        errors.append(key)
        return None
    if not math.isfinite(number):
        errors.append(key)
        return None
    return number


def _get_int(entry: dict[str, Any], key: str, errors: list[str]) -> int:
    value = entry.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _get_number(entry, key, errors)
    return 0 if number is None else int(number)


def _get_float(entry: dict[str, Any], key: str, errors: list[str]) -> float:
    number = _get_number(entry, key, errors)
    return 0.0 if number is None else number


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


@ParserRegistry.register(JSON_FORMAT)
class JsonLogParser(Parser):
    """Parser for the JSON access log format."""

    name = "json"

    def parse_line(self, line: str) -> RequestRecord:
        try:
            entry = json.loads(line, parse_constant=_reject_constant)
        except (json.JSONDecodeError, ValueError) as e:
            logger.error("JSON log line invalid: %s %r", e, line)
            raise ParseError("malformed JSON log line") from e

        if not isinstance(entry, dict):
            logger.error("JSON log line is not an object: %r", line)
            raise ParseError("JSON log line is not an object")

        errors: list[str] = []
        record = RequestRecord(
            raw_line=line,
            client_host=_get_str(entry, "ClientHost"),
            client_username=_get_str(entry, "ClientUsername"),
            start_utc=_get_str(entry, "StartUTC"),
            router_name=_get_str(entry, "RouterName"),
            request_method=_get_str(entry, "RequestMethod"),
            request_path=_get_str(entry, "RequestPath"),
            request_protocol=_get_str(entry, "RequestProtocol"),
            origin_status=_get_int(entry, "OriginStatus", errors),
            origin_content_size=_get_int(entry, "OriginContentSize", errors),
            referrer=_get_str(entry, "request_Referer"),
            user_agent=_get_str(entry, "request_User-Agent"),
            request_count=_get_int(entry, "RequestCount", errors),
            service_url=_get_str(entry, "ServiceURL"),
            duration=_get_float(entry, "Duration", errors) / NANOSECONDS_PER_MILLISECOND,
            overhead=_get_float(entry, "Overhead", errors) / NANOSECONDS_PER_MILLISECOND,
            conversion_errors=errors,
        )

        if errors:
            logger.warning("Unconvertible fields %s in line: %s", errors, line)
        record.log_fields()
        return record
