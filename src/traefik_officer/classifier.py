"""Path normalization and keep/drop decisions for parsed requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from traefik_officer.parsers.base import RequestRecord
from traefik_officer.rules import Rule, RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one record."""

    path: str
    keep: bool
    whitelisted: bool = False
    passthrough: bool = False


def _any_match(text: str, rules: tuple[Rule, ...]) -> bool:
    return any(rule.matches(text) for rule in rules)


class Classifier:
    """Applies a RuleSet to records.

    Args:
        rules: Compiled rule set.
        include_query_args: Keep the query string in the metric path.
        strict_whitelist: Only whitelisted paths are kept.
        passthrough_threshold_ms: Whitelisted requests slower than this are
            flagged for verbatim pass-through.
    """

    def __init__(
        self,
        rules: RuleSet,
        include_query_args: bool = False,
        strict_whitelist: bool = False,
        passthrough_threshold_ms: float = 1000.0,
    ) -> None:
        self.rules = rules
        self.include_query_args = include_query_args
        self.strict_whitelist = strict_whitelist
        self.passthrough_threshold_ms = passthrough_threshold_ms

    def normalize_path(self, path: str) -> str:
        if not self.include_query_args:
            path = path.split("?", 1)[0]
            path = path.split("&", 1)[0]

        # Collapse paths with embedded identifiers (/api/users/123 -> /api/users)
        for prefix in self.rules.merge_paths:
            if path.startswith(prefix):
                return prefix
        return path

    def is_whitelisted(self, path: str) -> bool:
        return any(entry in path for entry in self.rules.whitelist_paths)

    def is_ignored(self, router_name: str, path: str) -> bool:
        return (
            _any_match(router_name, self.rules.ignored_namespaces)
            or _any_match(router_name, self.rules.ignored_routers)
            or _any_match(path, self.rules.ignored_paths)
        )

    def classify(self, record: RequestRecord) -> Classification:
        path = self.normalize_path(record.request_path)
        whitelisted = self.is_whitelisted(path)

        if not whitelisted:
            if self.strict_whitelist:
                logger.debug("Dropping %s: not whitelisted (strict)", path)
                return Classification(path=path, keep=False)
            if self.is_ignored(record.router_name, path):
                logger.debug("Dropping %s via router %s: ignore rule matched", path, record.router_name)
                return Classification(path=path, keep=False)

        passthrough = whitelisted and record.duration > self.passthrough_threshold_ms
        return Classification(
            path=path, keep=True, whitelisted=whitelisted, passthrough=passthrough,
        )
