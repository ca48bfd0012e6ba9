"""Error kinds raised inside the ingestion pipeline."""

from __future__ import annotations


class OfficerError(Exception):
    """Base class for traefik-officer errors."""


class ParseError(OfficerError):
    """The line does not match the active grammar and is skipped."""


class ConversionError(OfficerError):
    """A numeric field could not be converted; the record is kept."""


class ConfigError(OfficerError):
    """The rule file is unusable; callers fall back to an empty rule set."""


class RotationError(OfficerError):
    """One rotation step failed; the cycle is skipped."""


class FatalIOError(OfficerError):
    """The access log can never be opened."""


class UnknownFormatError(OfficerError, KeyError):
    """No parser is registered for the requested log format."""
