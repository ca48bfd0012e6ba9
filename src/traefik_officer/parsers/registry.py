"""Registry of access log grammars, keyed by format name."""

from __future__ import annotations

from typing import Callable

from traefik_officer.errors import UnknownFormatError
from traefik_officer.parsers.base import Parser

JSON_FORMAT = "json"
TEXT_FORMAT = "text"


class ParserRegistry:
    """Maps a log format name ("text", "json") to its Parser class."""

    _parsers: dict[str, type[Parser]] = {}

    @classmethod
    def register(cls, name: str) -> Callable:
        """Class decorator registering a parser under a format name."""
        def decorator(parser_cls: type[Parser]) -> type[Parser]:
            if name in cls._parsers and cls._parsers[name] is not parser_cls:
                raise ValueError(f"Log format {name!r} already registered")
            parser_cls.name = name
            cls._parsers[name] = parser_cls
            return parser_cls
        return decorator

    @classmethod
    def get(cls, name: str) -> Parser:
        """Build the parser for a format name."""
        try:
            parser_cls = cls._parsers[name]
        except KeyError:
            raise UnknownFormatError(
                f"Unknown log format: {name!r}. Available: {cls.available()}"
            ) from None
        return parser_cls()

    @classmethod
    def for_logs(cls, json_logs: bool) -> Parser:
        """Parser matching the --json-logs setting."""
        return cls.get(JSON_FORMAT if json_logs else TEXT_FORMAT)

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._parsers)
