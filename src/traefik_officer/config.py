"""Process configuration and its command line flags."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from traefik_officer.rotation import DEFAULT_PROCESS_NAME
from traefik_officer.tailer import DEFAULT_POLL_INTERVAL

# Estimated bytes per access log line, used to turn a size budget into a line count
EST_BYTES_PER_LINE = 150


@dataclass
class OfficerConfig:
    """Runtime options for one exporter process."""

    log_file: str = "./accessLog.txt"
    include_query_args: bool = False
    config_file: str = ""
    listen_port: int = 8080
    max_accesslog_size: int = 10
    strict_whitelist: bool = False
    json_logs: bool = False
    pass_log_above_threshold: float = 1.0
    debug: bool = False
    router_label: bool = False
    poll_interval: float = DEFAULT_POLL_INTERVAL
    process_name: str = DEFAULT_PROCESS_NAME
    max_open_attempts: int | None = None

    def __post_init__(self) -> None:
        if not 0 < self.listen_port < 65536:
            raise ValueError(f"listen_port must be in 1-65535, got {self.listen_port}")
        if self.max_accesslog_size < 0:
            raise ValueError(f"max_accesslog_size must be >= 0, got {self.max_accesslog_size}")
        if self.pass_log_above_threshold < 0:
            raise ValueError(
                f"pass_log_above_threshold must be >= 0, got {self.pass_log_above_threshold}"
            )
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.max_open_attempts is not None and self.max_open_attempts < 1:
            raise ValueError(f"max_open_attempts must be >= 1, got {self.max_open_attempts}")

    @property
    def lines_to_rotate(self) -> int:
        """Lines between rotations; 0 when rotation is disabled."""
        return (1_000_000 * self.max_accesslog_size) // EST_BYTES_PER_LINE

    @property
    def passthrough_threshold_ms(self) -> float:
        return self.pass_log_above_threshold * 1000.0

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> OfficerConfig:
        return cls(
            log_file=args.log_file,
            include_query_args=args.include_query_args,
            config_file=args.config_file,
            listen_port=args.listen_port,
            max_accesslog_size=args.max_accesslog_size,
            strict_whitelist=args.strict_whitelist,
            json_logs=args.json_logs,
            pass_log_above_threshold=args.pass_log_above_threshold,
            debug=args.debug,
            router_label=args.router_label,
            poll_interval=args.poll_interval,
            process_name=args.process_name,
            max_open_attempts=args.max_open_attempts,
        )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="traefik-officer",
        description="Export per-endpoint latency metrics from a Traefik access log",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-file", default="./accessLog.txt", help="The traefik access log file",
    )
    parser.add_argument(
        "--include-query-args",
        action="store_true",
        help="Keep query arguments in the 'RequestPath' latency label",
    )
    parser.add_argument("--config-file", default="", help="Path to the rule file (JSON or YAML)")
    parser.add_argument("--listen-port", type=int, default=8080, help="Port to expose metrics on")
    parser.add_argument(
        "--max-accesslog-size",
        type=int,
        default=10,
        help="Megabytes the access log may grow to before rotating (0 disables rotation)",
    )
    parser.add_argument(
        "--strict-whitelist",
        action="store_true",
        help="Only count whitelisted paths; otherwise whitelisted paths just skip ignore rules",
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Parse JSON logs instead of the text format",
    )
    parser.add_argument(
        "--pass-log-above-threshold",
        type=float,
        default=1.0,
        help="Print whitelisted log lines to stdout when the request took longer than X seconds",
    )
    parser.add_argument(
        "--router-label",
        action="store_true",
        help="Add a RouterName label to the latency histogram",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help="Seconds between checks for new log data",
    )
    parser.add_argument(
        "--process-name",
        default=DEFAULT_PROCESS_NAME,
        help="Executable name of the process to signal after rotation",
    )
    parser.add_argument(
        "--max-open-attempts",
        type=int,
        default=None,
        help="Give up and exit with status 1 after this many failed opens of the log file "
        "(default: wait forever)",
    )
    return parser
