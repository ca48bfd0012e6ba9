"""Rotation of the access log while Traefik keeps writing to it.

Traefik reopens its access log on SIGUSR1. Rotation deletes the file,
creates an empty one at the same path and then signals the writer. Lines
written between the delete and the signal are lost; the tailer's
truncation detection keeps the pipeline consistent across that window.
"""

from __future__ import annotations

import logging
import os
import signal
from pathlib import Path
from typing import NamedTuple, Protocol

import psutil

from traefik_officer.errors import RotationError

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NAME = "traefik"
DEFAULT_REOPEN_SIGNAL = signal.SIGUSR1


class ProcessHandle(NamedTuple):
    pid: int
    name: str


class ProcessLocator(Protocol):
    """Process table lookup and signal delivery."""

    def locate(self, name: str) -> ProcessHandle | None:
        ...

    def signal(self, handle: ProcessHandle, signum: int) -> None:
        ...


class PsutilProcessLocator:
    """ProcessLocator backed by psutil."""

    def locate(self, name: str) -> ProcessHandle | None:
        for proc in psutil.process_iter(["pid", "name"]):
            if proc.info["name"] == name:
                return ProcessHandle(proc.info["pid"], name)
        return None

    def signal(self, handle: ProcessHandle, signum: int) -> None:
        try:
            psutil.Process(handle.pid).send_signal(signum)
        except psutil.Error as e:
            raise RotationError(f"Could not signal PID {handle.pid}: {e}") from e


class RotationCoordinator:
    """Truncates the log by replacement and asks the writer to reopen it.

    Args:
        path: The access log path shared with the writer.
        locator: Process lookup/signal capability.
        process_name: Executable name of the writer.
        reopen_signal: Signal telling the writer to reopen its log.
    """

    def __init__(
        self,
        path: str | Path,
        locator: ProcessLocator | None = None,
        process_name: str = DEFAULT_PROCESS_NAME,
        reopen_signal: int = DEFAULT_REOPEN_SIGNAL,
    ) -> None:
        self.path = Path(path)
        self.locator = locator if locator is not None else PsutilProcessLocator()
        self.process_name = process_name
        self.reopen_signal = reopen_signal

    def _locate_writer(self) -> ProcessHandle:
        try:
            handle = self.locator.locate(self.process_name)
        except psutil.Error as e:
            raise RotationError(f"Process lookup failed: {e}") from e
        if handle is None:
            raise RotationError(f"Could not find {self.process_name} process")
        return handle

    def _delete(self) -> None:
        try:
            os.remove(self.path)
        except OSError as e:
            raise RotationError(f"Deleting {self.path} failed: {e}") from e

    def _create(self) -> None:
        try:
            with open(self.path, "x"):
                pass
        except FileExistsError:
            # Writer recreated it first
            pass
        except OSError as e:
            raise RotationError(f"Creating {self.path} failed: {e}") from e

    def rotate(self) -> bool:
        """Run one rotation cycle.

        Returns True when ``path`` now refers to a new file, False when the
        cycle was skipped and the old file is untouched.
        """
        try:
            handle = self._locate_writer()
            logger.info("Found %s process @ PID %d", self.process_name, handle.pid)
            self._delete()
        except RotationError as e:
            logger.warning("%s - not rotating", e)
            return False

        try:
            self._create()
        except RotationError as e:
            logger.error("%s - log file left missing until the writer recreates it", e)
            return False

        try:
            self.locator.signal(handle, self.reopen_signal)
        except (RotationError, OSError) as e:
            logger.error("Rotated %s but could not signal the writer: %s", self.path, e)
        else:
            logger.info("Rotated %s and signalled PID %d", self.path, handle.pid)
        return True
