"""Follows a growing access log across truncation, replacement and rotation.

The tailer reads in binary mode so that ``offset`` is a real byte position
that can be compared against the file size on disk.
"""

from __future__ import annotations

import enum
import logging
import os
import threading
from pathlib import Path
from typing import BinaryIO, Callable, Iterator

from traefik_officer.errors import FatalIOError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


class TailState(enum.Enum):
    WAITING_FOR_FILE = "waiting_for_file"
    STREAMING = "streaming"
    ROTATING = "rotating"
    FAILED = "failed"


class LogTailer:
    """Streams newly appended lines from a single log file.

    Args:
        path: Log file to follow.
        poll_interval: Seconds to wait between checks for new data or for
            the file to appear.
        rotate_every: Lines read between rotations. 0 disables rotation.
        on_rotate: Called synchronously when ``rotate_every`` is reached.
            Returns True when the file at ``path`` was replaced, in which
            case the tailer finishes the old file and then reopens ``path``
            from offset 0.
        max_open_attempts: Consecutive failed opens before giving up with
            FatalIOError. None waits forever.
    """

    def __init__(
        self,
        path: str | Path,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        rotate_every: int = 0,
        on_rotate: Callable[[], bool] | None = None,
        max_open_attempts: int | None = None,
    ) -> None:
        if rotate_every < 0:
            raise ValueError(f"rotate_every must be >= 0, got {rotate_every}")
        self.path = Path(path)
        self.poll_interval = poll_interval
        self.rotate_every = rotate_every
        self.on_rotate = on_rotate
        self.max_open_attempts = max_open_attempts

        self._file: BinaryIO | None = None
        self._identity: tuple[int, int] | None = None
        self._offset = 0
        self._partial = b""
        self._lines_since_rotation = 0
        self._failed_opens = 0
        self._reopen_pending = False
        self._state = TailState.WAITING_FOR_FILE
        self._stop = threading.Event()

    # ── Public state ──────────────────────────────────────────────────

    @property
    def state(self) -> TailState:
        return self._state

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def lines_since_rotation(self) -> int:
        return self._lines_since_rotation

    def stop(self) -> None:
        """Make ``lines()`` return at its next wait."""
        self._stop.set()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        self._identity = None

    # ── State transitions ─────────────────────────────────────────────

    def open(self) -> bool:
        """Try to open the log file. Returns False while it is unavailable."""
        try:
            f = open(self.path, "rb")
        except OSError as e:
            self._failed_opens += 1
            self._state = TailState.WAITING_FOR_FILE
            logger.debug("Waiting for %s: %s", self.path, e)
            if self.max_open_attempts is not None and self._failed_opens >= self.max_open_attempts:
                self._state = TailState.FAILED
                raise FatalIOError(
                    f"Could not open {self.path} after {self._failed_opens} attempts: {e}"
                ) from e
            return False

        st = os.fstat(f.fileno())
        self.close()
        self._file = f
        self._identity = (st.st_dev, st.st_ino)
        self._offset = 0
        self._partial = b""
        self._failed_opens = 0
        self._state = TailState.STREAMING
        logger.info("Opened %s", self.path)
        return True

    def reopen(self) -> bool:
        """Drop the current handle and start over at offset 0 of ``path``."""
        self._reopen_pending = False
        self.close()
        self._partial = b""
        self._offset = 0
        return self.open()

    def _rotate(self) -> None:
        self._lines_since_rotation = 0
        if self.on_rotate is None:
            return
        self._state = TailState.ROTATING
        replaced = self.on_rotate()
        self._state = TailState.STREAMING
        # Lines already in the old file are drained before switching
        self._reopen_pending = bool(replaced)

    def _check_file_changed(self) -> None:
        """At EOF: detect truncation or replacement of the file on disk."""
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            logger.info("Log file %s disappeared, waiting for it", self.path)
            self.close()
            self._state = TailState.WAITING_FOR_FILE
            return
        except OSError as e:
            logger.warning("Could not stat %s: %s", self.path, e)
            return

        if (st.st_dev, st.st_ino) != self._identity:
            logger.info("Log file %s was replaced, reopening", self.path)
            self.reopen()
        elif st.st_size < self._offset:
            logger.info("Log file %s was truncated, reading from start", self.path)
            self.reopen()

    # ── Reading ───────────────────────────────────────────────────────

    def _read_line(self) -> str | None:
        assert self._file is not None
        chunk = self._file.readline()
        if not chunk:
            return None
        self._offset += len(chunk)
        if not chunk.endswith(b"\n"):
            self._partial += chunk
            return None
        data = self._partial + chunk
        self._partial = b""
        return data.rstrip(b"\r\n").decode("utf-8", errors="replace")

    def lines(self) -> Iterator[str]:
        """Yield each complete line in arrival order until ``stop()``."""
        while not self._stop.is_set():
            if self._file is None and not self.open():
                self._stop.wait(self.poll_interval)
                continue

            line = self._read_line()
            if line is None:
                if self._reopen_pending:
                    if not self.reopen():
                        logger.warning("Log file %s missing after rotation", self.path)
                    continue
                self._check_file_changed()
                if self._file is not None and self._file.tell() < os.fstat(self._file.fileno()).st_size:
                    continue
                self._stop.wait(self.poll_interval)
                continue

            self._lines_since_rotation += 1
            if self.rotate_every and self._lines_since_rotation >= self.rotate_every:
                self._rotate()
            yield line

        self.close()
