"""Drives lines through parse, classify and aggregate."""

from __future__ import annotations

import logging
import sys
from typing import Iterable, TextIO

from traefik_officer.aggregator import Aggregator
from traefik_officer.classifier import Classification, Classifier
from traefik_officer.errors import ParseError
from traefik_officer.parsers.base import Parser

logger = logging.getLogger(__name__)


class Pipeline:
    """Sequential line pipeline.

    Args:
        parser: Active log grammar, chosen once at startup.
        classifier: Path normalization and filtering.
        aggregator: Metric writer.
        passthrough: Stream receiving verbatim lines of slow whitelisted
            requests. Defaults to stdout.
    """

    def __init__(
        self,
        parser: Parser,
        classifier: Classifier,
        aggregator: Aggregator,
        passthrough: TextIO | None = None,
    ) -> None:
        self.parser = parser
        self.classifier = classifier
        self.aggregator = aggregator
        self.passthrough = passthrough if passthrough is not None else sys.stdout

    def process_line(self, line: str) -> Classification | None:
        """Handle one line. Returns None when the line could not be parsed."""
        logger.debug("Read Line: %s", line)
        try:
            record = self.parser.parse_line(line)
        except ParseError:
            logger.error("Parse error for: %s", line)
            return None

        classification = self.classifier.classify(record)
        if classification.passthrough:
            print(line, file=self.passthrough, flush=True)
        self.aggregator.aggregate(record, classification)
        return classification

    def run(self, lines: Iterable[str]) -> int:
        """Process every line from ``lines``; returns the number of lines seen."""
        count = 0
        for line in lines:
            count += 1
            self.process_line(line)
        return count
