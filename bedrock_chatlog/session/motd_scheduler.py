"""Delayed message-of-the-day whispers to players joining the server."""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from absl import logging

from bedrock_chatlog.session.session_state import ConnectionPhase, SessionState

# Gives the joining player time to spawn before the whisper arrives.
MOTD_DELAY_SECS = 5.0


def whisper_command(player: str, message: str) -> str:
    """Build the chat command that privately messages a player.

    Raises:
        ValueError: If the name contains a double quote, which cannot be
            expressed inside the quoted target selector
    """
    if '"' in player:
        raise ValueError(f"Cannot whisper to player name with a quote: {player!r}")
    return f'/tell "{player}" {message}'


class MotdScheduler:
    """Schedules fire-and-forget whispers tied to a session generation.

    A whisper is only sent if the session that saw the join is still the
    current, connected one when the delay expires.
    """

    def __init__(
        self,
        state: SessionState,
        motd: Optional[str] = None,
        alone_motd: Optional[str] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        delay_secs: float = MOTD_DELAY_SECS,
    ) -> None:
        """Initialize the scheduler.

        Args:
            state: Session state shared with the controller
            motd: Whispered to every joining player
            alone_motd: Whispered additionally when the joiner is alone
            sleep: Coroutine used to wait out the delay
            delay_secs: Delay between the join and the whispers
        """
        self._state = state
        self._motd = motd
        self._alone_motd = alone_motd
        self._sleep = sleep
        self._delay_secs = delay_secs
        self._tasks: Set[asyncio.Task[None]] = set()

    @property
    def enabled(self) -> bool:
        return bool(self._motd or self._alone_motd)

    def schedule(self, client: Any, player: str, generation: int) -> Optional["asyncio.Task[None]"]:
        """Schedule the whispers for a player who just joined.

        Args:
            client: Session client used to send the whisper commands
            player: Name of the joining player
            generation: Session generation that observed the join

        Returns:
            The scheduled task, or None if no message is configured
        """
        if not self.enabled:
            return None
        task = asyncio.create_task(self._deliver(client, player, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logging.debug("Scheduled MOTD for %s in %.1fs", player, self._delay_secs)
        return task

    def cancel_all(self) -> None:
        """Cancel every pending whisper."""
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    async def _deliver(self, client: Any, player: str, generation: int) -> None:
        await self._sleep(self._delay_secs)

        if not self._state.is_current(generation):
            logging.debug("Dropping MOTD for %s from stale session", player)
            return
        if self._state.phase is not ConnectionPhase.CONNECTED:
            logging.debug("Dropping MOTD for %s, session is %s", player, self._state.phase.value)
            return

        if self._motd:
            await self._whisper(client, player, self._motd)
        if self._alone_motd and self._state.present_player_count == 1:
            await self._whisper(client, player, self._alone_motd)

    async def _whisper(self, client: Any, player: str, message: str) -> None:
        try:
            await client.send_command(whisper_command(player, message))
            logging.info("Sent MOTD to %s", player)
        except Exception as e:
            logging.warning("Failed to send MOTD to %s: %s", player, e)
