"""Operator-defined filtering and merging rules.

The rule file is a single object with these keys, each holding a list of
strings:

    IgnoredNamespaces         regexes matched against RouterName
    IgnoredRouters            regexes matched against RouterName
    IgnoredPathsRegex         regexes matched against the normalized path
    MergePathsWithExtensions  literal path prefixes to collapse onto
    WhitelistPaths            literal substrings that bypass ignore rules

JSON is the native format; files ending in .yaml/.yml are read as YAML.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from traefik_officer.errors import ConfigError

logger = logging.getLogger(__name__)

_REGEX_KEYS = {
    "IgnoredNamespaces": "ignored_namespaces",
    "IgnoredRouters": "ignored_routers",
    "IgnoredPathsRegex": "ignored_paths",
}

_LITERAL_KEYS = {
    "MergePathsWithExtensions": "merge_paths",
    "WhitelistPaths": "whitelist_paths",
}

_YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass(frozen=True)
class Rule:
    """A compiled regex rule. An invalid pattern never matches."""

    pattern: str
    regex: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    @classmethod
    def compile(cls, pattern: str) -> Rule:
        try:
            return cls(pattern, re.compile(pattern))
        except re.error as e:
            logger.warning("Error compiling regex %r: %s (rule disabled)", pattern, e)
            return cls(pattern, None)

    @property
    def valid(self) -> bool:
        return self.regex is not None

    def matches(self, text: str) -> bool:
        if self.regex is None:
            return False
        return self.regex.search(text) is not None


def _string_list(raw: dict[str, Any], key: str) -> list[str]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings, got {value!r}")
    return value


@dataclass(frozen=True)
class RuleSet:
    """Immutable, pre-compiled rule set."""

    ignored_namespaces: tuple[Rule, ...] = ()
    ignored_routers: tuple[Rule, ...] = ()
    ignored_paths: tuple[Rule, ...] = ()
    merge_paths: tuple[str, ...] = ()
    whitelist_paths: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> RuleSet:
        return cls()

    @classmethod
    def from_dict(cls, raw: Any) -> RuleSet:
        """Compile a rule set from a decoded rule file."""
        if raw is None:
            return cls.empty()
        if not isinstance(raw, dict):
            raise ConfigError(f"Rule file must hold an object, got {type(raw).__name__}")

        unknown = set(raw) - set(_REGEX_KEYS) - set(_LITERAL_KEYS)
        if unknown:
            logger.warning("Ignoring unknown rule keys: %s", sorted(unknown))

        kwargs: dict[str, tuple] = {}
        for key, attr in _REGEX_KEYS.items():
            kwargs[attr] = tuple(Rule.compile(p) for p in _string_list(raw, key))
        for key, attr in _LITERAL_KEYS.items():
            kwargs[attr] = tuple(_string_list(raw, key))
        return cls(**kwargs)

    def describe(self) -> str:
        def patterns(rules: tuple[Rule, ...]) -> list[str]:
            return [r.pattern for r in rules]

        return (
            f"Ignoring Namespaces: {patterns(self.ignored_namespaces)} "
            f"Ignoring Routers: {patterns(self.ignored_routers)} "
            f"Ignoring Paths: {patterns(self.ignored_paths)} "
            f"Merging Paths: {list(self.merge_paths)} "
            f"Whitelist: {list(self.whitelist_paths)}"
        )


def load_rules(path: str | Path | None) -> RuleSet:
    """Load the rule file at ``path``, falling back to an empty rule set.

    A missing path means "no rules". Any read, decode or shape problem is
    logged and also yields the empty set, so startup never fails here.
    """
    if not path:
        logger.info("No rule file configured, every request is kept")
        return RuleSet.empty()

    path = Path(path)
    try:
        with open(path) as f:
            if path.suffix.lower() in _YAML_SUFFIXES:
                raw = yaml.safe_load(f)
            else:
                raw = json.load(f)
        return RuleSet.from_dict(raw)
    except OSError as e:
        logger.error("Error opening config file %s: %s", path, e)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error("Error decoding config file %s: %s", path, e)
    except ConfigError as e:
        logger.error("Invalid config file %s: %s", path, e)
    return RuleSet.empty()
