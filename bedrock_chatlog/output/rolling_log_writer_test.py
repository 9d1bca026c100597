"""Unit tests for RollingLogWriter."""

import io
import os
import shutil
import tempfile
import unittest
from datetime import datetime
from typing import List

from bedrock_chatlog.output.rolling_log_writer import RollingLogWriter


class FakeClock:
    """Clock returning a settable time."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RollingLogWriterTest(unittest.TestCase):
    """Test cases for RollingLogWriter."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.log_dir = os.path.join(self.test_dir, "logs")
        self.clock = FakeClock(datetime(2024, 5, 1, 13, 4, 5))
        self.console = io.StringIO()
        self.writer = RollingLogWriter(
            self.log_dir, "chat-", clock=self.clock, console=self.console
        )

    def tearDown(self) -> None:
        """Clean up test fixtures."""
        self.writer.close()
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def _read_lines(self, date_stamp: str) -> List[str]:
        path = os.path.join(self.log_dir, f"chat-{date_stamp}.log")
        with open(path, "r", encoding="utf-8") as f:
            return f.read().splitlines()

    def test_no_file_before_first_write(self) -> None:
        """Test that constructing the writer touches nothing on disk."""
        self.assertFalse(os.path.exists(self.log_dir))
        self.assertIsNone(self.writer.open_file_path)

    def test_append_creates_directory_and_file(self) -> None:
        """Test that the first append creates the directory and dated file."""
        self.writer.append("[Alice] Hello")

        self.assertTrue(os.path.isdir(self.log_dir))
        self.assertEqual(
            self.writer.open_file_path, os.path.join(self.log_dir, "chat-2024-05-01.log")
        )
        self.assertEqual(self._read_lines("2024-05-01"), ["(13:04:05) [Alice] Hello"])

    def test_append_mirrors_to_console(self) -> None:
        """Test that each line is also written to the console stream."""
        self.writer.append("* [Bob] drowned.")
        self.assertEqual(self.console.getvalue(), "(13:04:05) * [Bob] drowned.\n")

    def test_same_day_reuses_handle(self) -> None:
        """Test that appends on the same date share one open file."""
        self.writer.append("first")
        first_handle = self.writer._file  # noqa: SLF001
        self.clock.now = datetime(2024, 5, 1, 23, 59, 59)
        self.writer.append("second")

        self.assertIs(self.writer._file, first_handle)  # noqa: SLF001
        self.assertEqual(
            self._read_lines("2024-05-01"), ["(13:04:05) first", "(23:59:59) second"]
        )

    def test_rotation_on_date_change(self) -> None:
        """Test that a new file is opened when the date changes."""
        self.writer.append("before midnight")
        first_handle = self.writer._file  # noqa: SLF001
        assert first_handle is not None

        self.clock.now = datetime(2024, 5, 2, 0, 0, 1)
        self.writer.append("after midnight")

        self.assertTrue(first_handle.closed)
        self.assertEqual(self.writer.current_date_stamp, "2024-05-02")
        self.assertEqual(self._read_lines("2024-05-01"), ["(13:04:05) before midnight"])
        self.assertEqual(self._read_lines("2024-05-02"), ["(00:00:01) after midnight"])

    def test_reopen_appends_instead_of_truncating(self) -> None:
        """Test that a restarted writer keeps earlier lines of the day."""
        self.writer.append("before restart")
        self.writer.close()

        restarted = RollingLogWriter(
            self.log_dir, "chat-", clock=self.clock, console=self.console
        )
        restarted.append("after restart")
        restarted.close()

        self.assertEqual(
            self._read_lines("2024-05-01"),
            ["(13:04:05) before restart", "(13:04:05) after restart"],
        )

    def test_lines_are_flushed_before_close(self) -> None:
        """Test that appended lines are readable while the file is open."""
        self.writer.append("durable")
        self.assertEqual(self._read_lines("2024-05-01"), ["(13:04:05) durable"])

    def test_write_raw_skips_timestamp_and_console(self) -> None:
        """Test that raw payloads go to the file only."""
        self.writer.write_raw('{"name":"text"}')
        self.assertEqual(self._read_lines("2024-05-01"), ['{"name":"text"}'])
        self.assertEqual(self.console.getvalue(), "")

    def test_close_is_idempotent(self) -> None:
        """Test that closing twice is harmless."""
        self.writer.append("line")
        self.writer.close()
        self.writer.close()
        self.assertIsNone(self.writer.open_file_path)

    def test_unwritable_directory_raises(self) -> None:
        """Test that file system errors propagate to the caller."""
        blocker = os.path.join(self.test_dir, "not_a_dir")
        with open(blocker, "w") as f:
            f.write("x")
        writer = RollingLogWriter(
            os.path.join(blocker, "logs"), "chat-", clock=self.clock, console=self.console
        )
        with self.assertRaises(OSError):
            writer.append("lost?")


if __name__ == "__main__":
    unittest.main()
