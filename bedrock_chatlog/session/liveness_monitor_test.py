"""Tests for LivenessMonitor."""

import asyncio
import os
import shutil
import tempfile
import unittest
from unittest.mock import AsyncMock, MagicMock

from absl.testing import absltest

from bedrock_chatlog.session.liveness_monitor import LivenessMonitor


class LivenessMonitorTest(unittest.IsolatedAsyncioTestCase, absltest.TestCase):
    """Tests for LivenessMonitor."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.stop_file = os.path.join(self.test_dir, "chatlog.stop")
        self.controller = MagicMock()
        self.controller.is_stopped = False

        async def stop() -> None:
            self.controller.is_stopped = True

        self.controller.request_stop = AsyncMock(side_effect=stop)

    def tearDown(self) -> None:
        """Clean up test fixtures."""
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def _touch_stop_file(self) -> None:
        with open(self.stop_file, "w") as f:
            f.write("")

    async def test_check_without_stop_file(self) -> None:
        """Test that nothing happens while the sentinel is absent."""
        monitor = LivenessMonitor(self.controller, self.stop_file)

        self.assertFalse(await monitor.check())
        self.controller.request_stop.assert_not_awaited()

    async def test_check_stops_and_acknowledges(self) -> None:
        """Test that the sentinel triggers a stop and is deleted."""
        self._touch_stop_file()
        monitor = LivenessMonitor(self.controller, self.stop_file)

        self.assertTrue(await monitor.check())
        self.controller.request_stop.assert_awaited_once()
        self.assertFalse(os.path.exists(self.stop_file))

    async def test_run_polls_at_fixed_period(self) -> None:
        """Test the poll loop until the sentinel appears."""
        sleeps = []

        async def fake_sleep(secs: float) -> None:
            sleeps.append(secs)
            if len(sleeps) == 3:
                self._touch_stop_file()

        monitor = LivenessMonitor(
            self.controller, self.stop_file, poll_interval_secs=1.0, sleep=fake_sleep
        )
        await asyncio.wait_for(monitor.run(), timeout=5)

        self.assertEqual(sleeps, [1.0, 1.0, 1.0])
        self.controller.request_stop.assert_awaited_once()
        self.assertFalse(os.path.exists(self.stop_file))

    async def test_run_ends_when_stopped_elsewhere(self) -> None:
        """Test that the monitor exits once the controller is stopped."""

        async def fake_sleep(secs: float) -> None:
            self.controller.is_stopped = True

        monitor = LivenessMonitor(self.controller, self.stop_file, sleep=fake_sleep)
        await asyncio.wait_for(monitor.run(), timeout=5)

        self.controller.request_stop.assert_not_awaited()


if __name__ == "__main__":
    absltest.main()
