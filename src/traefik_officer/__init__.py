"""traefik-officer: per-endpoint latency metrics from Traefik access logs."""

from traefik_officer.aggregator import Aggregator
from traefik_officer.classifier import Classification, Classifier
from traefik_officer.config import OfficerConfig
from traefik_officer.metrics import OfficerMetrics
from traefik_officer.parsers import Parser, ParserRegistry, RequestRecord
from traefik_officer.pipeline import Pipeline
from traefik_officer.rotation import ProcessHandle, ProcessLocator, RotationCoordinator
from traefik_officer.rules import Rule, RuleSet, load_rules
from traefik_officer.tailer import LogTailer, TailState

__all__ = [
    "Aggregator",
    "Classification",
    "Classifier",
    "LogTailer",
    "OfficerConfig",
    "OfficerMetrics",
    "Parser",
    "ParserRegistry",
    "Pipeline",
    "ProcessHandle",
    "ProcessLocator",
    "RequestRecord",
    "RotationCoordinator",
    "Rule",
    "RuleSet",
    "TailState",
    "load_rules",
]
