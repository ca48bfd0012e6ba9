from traefik_officer.parsers.base import Parser, RequestRecord
from traefik_officer.parsers.registry import ParserRegistry

# Import parsers to trigger registration
import traefik_officer.parsers.json_log  # noqa: F401
import traefik_officer.parsers.text_log  # noqa: F401

__all__ = ["Parser", "ParserRegistry", "RequestRecord"]
