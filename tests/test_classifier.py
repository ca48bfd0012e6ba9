"""Tests for path normalization and keep/drop decisions."""

from __future__ import annotations

from traefik_officer.classifier import Classifier
from traefik_officer.parsers.base import RequestRecord
from traefik_officer.rules import RuleSet


def _record(path: str, router: str = "api@kubernetes", duration: float = 10.0) -> RequestRecord:
    return RequestRecord(
        raw_line="",
        request_method="GET",
        request_path=path,
        router_name=router,
        duration=duration,
    )


class TestNormalizePath:
    def test_query_args_stripped(self):
        classifier = Classifier(RuleSet.empty())
        assert classifier.normalize_path("/search?q=1&page=2") == "/search"

    def test_ampersand_stripped(self):
        classifier = Classifier(RuleSet.empty())
        assert classifier.normalize_path("/legacy&session=abc") == "/legacy"

    def test_query_args_kept(self):
        classifier = Classifier(RuleSet.empty(), include_query_args=True)
        assert classifier.normalize_path("/search?q=1&page=2") == "/search?q=1&page=2"

    def test_merge_after_strip(self):
        rules = RuleSet.from_dict({"MergePathsWithExtensions": ["/api/v1/users"]})
        classifier = Classifier(rules)
        assert classifier.normalize_path("/api/v1/users/123?x=1") == "/api/v1/users"

    def test_first_matching_prefix_wins(self):
        rules = RuleSet.from_dict({"MergePathsWithExtensions": ["/api", "/api/v1"]})
        assert Classifier(rules).normalize_path("/api/v1/x") == "/api"

    def test_unmatched_path_unchanged(self):
        rules = RuleSet.from_dict({"MergePathsWithExtensions": ["/api/v1/users"]})
        assert Classifier(rules).normalize_path("/static/app.js") == "/static/app.js"

    def test_idempotent(self):
        rules = RuleSet.from_dict({
            "MergePathsWithExtensions": ["/api/v1/users"],
            "IgnoredPathsRegex": ["^/static"],
        })
        classifier = Classifier(rules)
        for path in ["/api/v1/users/7?a=b", "/static/x.css&v=2", "/other?q"]:
            first = classifier.classify(_record(path))
            second = classifier.classify(_record(first.path))
            assert second == first


class TestClassify:
    def test_empty_rules_keep_everything(self):
        result = Classifier(RuleSet.empty()).classify(_record("/anything"))
        assert result.keep
        assert not result.whitelisted
        assert not result.passthrough

    def test_ignored_namespace_drops(self):
        rules = RuleSet.from_dict({"IgnoredNamespaces": ["kube-system"]})
        result = Classifier(rules).classify(_record("/x", router="dash-kube-system@kubernetes"))
        assert not result.keep

    def test_ignored_router_drops(self):
        rules = RuleSet.from_dict({"IgnoredRouters": ["^dashboard"]})
        assert not Classifier(rules).classify(_record("/x", router="dashboard@internal")).keep

    def test_ignored_path_drops(self):
        rules = RuleSet.from_dict({"IgnoredPathsRegex": ["^/metrics"]})
        assert not Classifier(rules).classify(_record("/metrics")).keep

    def test_ignored_path_uses_normalized_path(self):
        rules = RuleSet.from_dict({"IgnoredPathsRegex": ["^/ping$"]})
        assert not Classifier(rules).classify(_record("/ping?probe=1")).keep

    def test_invalid_regex_does_not_drop(self):
        rules = RuleSet.from_dict({"IgnoredRouters": ["("]})
        assert Classifier(rules).classify(_record("/x", router="(")).keep

    def test_whitelist_bypasses_ignore_rules(self):
        rules = RuleSet.from_dict({
            "IgnoredRouters": [".*"],
            "WhitelistPaths": ["/health"],
        })
        classifier = Classifier(rules)
        assert classifier.classify(_record("/health")).keep
        assert not classifier.classify(_record("/other")).keep

    def test_strict_whitelist(self):
        rules = RuleSet.from_dict({
            "IgnoredRouters": ["api"],
            "WhitelistPaths": ["/health"],
        })
        classifier = Classifier(rules, strict_whitelist=True)
        kept = classifier.classify(_record("/health"))
        assert kept.keep
        assert kept.whitelisted
        assert not classifier.classify(_record("/other", router="unrelated")).keep

    def test_strict_whitelist_with_empty_whitelist_drops_all(self):
        classifier = Classifier(RuleSet.empty(), strict_whitelist=True)
        assert not classifier.classify(_record("/health")).keep

    def test_passthrough_for_slow_whitelisted(self):
        rules = RuleSet.from_dict({"WhitelistPaths": ["/api"]})
        classifier = Classifier(rules, passthrough_threshold_ms=1000.0)
        assert classifier.classify(_record("/api/x", duration=1500.0)).passthrough
        assert not classifier.classify(_record("/api/x", duration=1000.0)).passthrough

    def test_no_passthrough_when_not_whitelisted(self):
        classifier = Classifier(RuleSet.empty(), passthrough_threshold_ms=0.0)
        result = classifier.classify(_record("/api/x", duration=5000.0))
        assert result.keep
        assert not result.passthrough
