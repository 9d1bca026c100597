"""Writes the activity log to one append-only file per calendar day."""

import os
import sys
from datetime import datetime
from typing import Callable, Optional, TextIO

from absl import logging


class RollingLogWriter:
    """Appends timestamped lines to <log_dir>/<prefix><YYYY-MM-DD>.log.

    Every line is also mirrored to a console stream. The file is reopened in
    append mode whenever the local date changes, so a restart on the same day
    keeps adding to the existing file. Write errors are not caught here.
    """

    def __init__(
        self,
        log_dir: str,
        prefix: str,
        clock: Callable[[], datetime] = datetime.now,
        console: Optional[TextIO] = None,
    ) -> None:
        """Initialize the writer. No file is opened until the first write.

        Args:
            log_dir: Directory holding the log files (created on demand)
            prefix: File name prefix, e.g. "chat-"
            clock: Returns the current local time
            console: Stream receiving a copy of each line (default: stdout)
        """
        self._log_dir = log_dir
        self._prefix = prefix
        self._clock = clock
        self._console = console
        self._file: Optional[TextIO] = None
        self._date_stamp: Optional[str] = None
        self._file_path: Optional[str] = None

    def append(self, line: str) -> None:
        """Write a line prefixed with the local wall-clock time."""
        now = self._clock()
        handle = self._allocate_stream(now)
        entry = f"({now.strftime('%H:%M:%S')}) {line}"
        console = self._console if self._console is not None else sys.stdout
        console.write(f"{entry}\n")
        console.flush()
        handle.write(f"{entry}\n")
        handle.flush()

    def write_raw(self, text: str) -> None:
        """Write text to the log file as-is, without timestamp or console copy."""
        handle = self._allocate_stream(self._clock())
        handle.write(f"{text}\n")
        handle.flush()

    def close(self) -> None:
        """Flush and close the open log file, if any."""
        if self._file is not None:
            handle = self._file
            self._file = None
            self._date_stamp = None
            handle.close()
            logging.info("Closed log file %s", self._file_path)

    @property
    def current_date_stamp(self) -> Optional[str]:
        return self._date_stamp

    @property
    def open_file_path(self) -> Optional[str]:
        """Path of the open log file, None before the first write or after close."""
        return self._file_path if self._file is not None else None

    def _allocate_stream(self, now: datetime) -> TextIO:
        date_stamp = now.strftime("%Y-%m-%d")
        if self._file is not None and self._date_stamp == date_stamp:
            return self._file

        if self._file is not None:
            self._file.close()
            logging.info("Rotating log file %s", self._file_path)
            self._file = None

        self._ensure_log_dir()
        file_path = os.path.join(self._log_dir, f"{self._prefix}{date_stamp}.log")
        self._file = open(file_path, "a", encoding="utf-8")
        self._date_stamp = date_stamp
        self._file_path = file_path
        logging.info("Writing activity log to %s", file_path)
        return self._file

    def _ensure_log_dir(self) -> None:
        if not os.path.isdir(self._log_dir):
            os.makedirs(self._log_dir, exist_ok=True)
            logging.info("Created log directory %s", self._log_dir)
