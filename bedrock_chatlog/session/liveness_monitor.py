"""Polls for an external stop request and shuts the chat logger down."""

import asyncio
import os
from typing import Any, Awaitable, Callable

from absl import logging

from bedrock_chatlog.session.session_controller import SessionController

POLL_INTERVAL_SECS = 1.0


class LivenessMonitor:
    """Watches for a sentinel file and stops the session when it appears.

    The sentinel is deleted once the stop has been carried out, so the next
    run is not stopped by a leftover file.
    """

    def __init__(
        self,
        controller: SessionController,
        stop_file: str,
        poll_interval_secs: float = POLL_INTERVAL_SECS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._controller = controller
        self._stop_file = stop_file
        self._poll_interval_secs = poll_interval_secs
        self._sleep = sleep

    async def run(self) -> None:
        """Poll until a stop is requested, by the sentinel or otherwise."""
        logging.info(
            "Watching for %s every %.1fs", self._stop_file, self._poll_interval_secs
        )
        while not self._controller.is_stopped:
            await self._sleep(self._poll_interval_secs)
            if await self.check():
                return

    async def check(self) -> bool:
        """Stop the controller if the sentinel file exists.

        Returns:
            True if a stop was triggered
        """
        if not os.path.exists(self._stop_file):
            return False

        logging.info("Found %s, shutting down", self._stop_file)
        await self._controller.request_stop()
        try:
            os.remove(self._stop_file)
        except FileNotFoundError:
            logging.debug("%s was already removed", self._stop_file)
        return True
