"""CLI entry point: traefik-officer [flags]."""

from __future__ import annotations

import argparse
import logging
import sys

from traefik_officer.aggregator import Aggregator
from traefik_officer.classifier import Classifier
from traefik_officer.config import OfficerConfig, build_arg_parser
from traefik_officer.errors import FatalIOError
from traefik_officer.metrics import OfficerMetrics
from traefik_officer.parsers import ParserRegistry
from traefik_officer.pipeline import Pipeline
from traefik_officer.rotation import RotationCoordinator
from traefik_officer.rules import load_rules
from traefik_officer.server import serve_metrics
from traefik_officer.tailer import LogTailer

logger = logging.getLogger(__name__)


def build_pipeline(config: OfficerConfig, metrics: OfficerMetrics) -> Pipeline:
    """Wire parser, classifier and aggregator for ``config``."""
    rules = load_rules(config.config_file)
    logger.info("%s", rules.describe())

    parser = ParserRegistry.for_logs(config.json_logs)
    logger.info("Setting parser to %s", parser.name)
    classifier = Classifier(
        rules,
        include_query_args=config.include_query_args,
        strict_whitelist=config.strict_whitelist,
        passthrough_threshold_ms=config.passthrough_threshold_ms,
    )
    aggregator = Aggregator(metrics, track_overhead=config.json_logs)
    return Pipeline(parser, classifier, aggregator)


def build_tailer(config: OfficerConfig) -> LogTailer:
    coordinator = RotationCoordinator(config.log_file, process_name=config.process_name)
    rotate_every = config.lines_to_rotate
    if rotate_every:
        logger.info("Rotating logs every %d lines", rotate_every)
    else:
        logger.info("Log rotation disabled")
    return LogTailer(
        config.log_file,
        poll_interval=config.poll_interval,
        rotate_every=rotate_every,
        on_rotate=coordinator.rotate,
        max_open_attempts=config.max_open_attempts,
    )


def run(config: OfficerConfig) -> int:
    logger.info("Access Logs At: %s", config.log_file)
    logger.info("Config File At: %s", config.config_file or "(none)")
    logger.info("Display Query Args In Metrics: %s", config.include_query_args)
    logger.info("JSON Logs: %s", config.json_logs)

    metrics = OfficerMetrics(
        include_router=config.router_label, track_overhead=config.json_logs,
    )
    pipeline = build_pipeline(config, metrics)
    serve_metrics(config.listen_port, metrics.registry)

    tailer = build_tailer(config)
    logger.info("Starting read of %s", config.log_file)
    try:
        pipeline.run(tailer.lines())
    except FatalIOError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
    finally:
        tailer.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = OfficerConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
