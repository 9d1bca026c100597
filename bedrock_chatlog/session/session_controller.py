"""Connection lifecycle, reconnect policy and event dispatch for the chat logger."""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Tuple

from absl import logging

from bedrock_chatlog.config import ChatlogConfig
from bedrock_chatlog.events.session_event import (
    ClosedEvent,
    ErrorEvent,
    JoinedEvent,
    KickEvent,
    SessionEvent,
    TextEvent,
    TextKind,
    UnknownEvent,
)
from bedrock_chatlog.output.rolling_log_writer import RollingLogWriter
from bedrock_chatlog.session.motd_scheduler import MotdScheduler
from bedrock_chatlog.session.session_state import ConnectionPhase, SessionState
from bedrock_chatlog.translation.event_translator import EventTranslator
from bedrock_chatlog.translation.translation_table import (
    PLAYER_JOINED_KEY,
    PLAYER_LEFT_KEY,
    normalize_locale_key,
)

_TERMINAL_EVENTS = (KickEvent, ClosedEvent, ErrorEvent)


class SessionController:
    """Owns the game session: connects, reconnects and logs what it observes.

    All work happens on one event loop. Events from the active client are
    queued together with the session generation that produced them and are
    dispatched strictly in order by run(). Timers (reconnect, MOTD) are tasks
    that re-check the generation and phase when they fire, so a timer that
    outlived its session does nothing.
    """

    def __init__(
        self,
        config: ChatlogConfig,
        client_factory: Callable[[], Any],
        writer: RollingLogWriter,
        translator: Optional[EventTranslator] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        motd_scheduler: Optional[MotdScheduler] = None,
    ) -> None:
        """Initialize the controller in the IDLE phase.

        Args:
            config: Validated chat logger settings
            client_factory: Builds a fresh, unconnected session client; called
                once per connection attempt
            writer: Destination of the activity log
            translator: Event translator (creates a new one if None)
            sleep: Coroutine used for the reconnect and MOTD delays
            motd_scheduler: MOTD scheduler (built from config if None)
        """
        self._config = config
        self._client_factory = client_factory
        self._writer = writer
        self._translator = translator or EventTranslator()
        self._sleep = sleep
        self._state = SessionState(
            retry_enabled=config.retry,
            retry_interval_secs=config.retry_interval_secs,
        )
        self._motd = motd_scheduler or MotdScheduler(
            self._state, motd=config.motd, alone_motd=config.alone_motd, sleep=sleep
        )
        self._client: Optional[Any] = None
        self._events: asyncio.Queue[Optional[Tuple[int, SessionEvent]]] = asyncio.Queue()
        self._pump_task: Optional[asyncio.Task[None]] = None
        self._retry_task: Optional[asyncio.Task[None]] = None
        self._failure: Optional[Exception] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_stopped(self) -> bool:
        return self._state.stopping

    async def run(self) -> None:
        """Connect and dispatch events until stopped.

        Also returns once the session is lost while reconnecting is disabled.
        Log write failures propagate to the caller.
        """
        logging.info(
            "Starting chat logger for %s:%d as %s",
            self._config.host,
            self._config.port,
            self._config.username,
        )
        await self.connect()

        while not self._finished():
            item = await self._events.get()
            if self._failure is not None:
                raise self._failure
            if item is None:
                continue
            generation, event = item
            await self.dispatch(generation, event)

        logging.info("Chat logger session loop ended")

    async def connect(self) -> None:
        """Open a fresh session, discarding any previous client."""
        if self._state.stopping:
            return

        self._cancel_retry()
        self._discard_client()
        self._state.generation += 1
        generation = self._state.generation
        self._state.phase = ConnectionPhase.CONNECTING

        client = self._client_factory()
        self._client = client
        config = self._config
        try:
            await client.connect(config.host, config.port, config.username, config.offline)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logging.warning("Connection attempt %d failed: %s", generation, e)
            self.handle_disconnect(
                generation,
                f"Bot [{config.username}] could not connect to "
                f"{config.host}:{config.port}. ({e})",
            )
            return

        if not self._state.is_current(generation):
            # Stopped or superseded while the handshake was in flight.
            _close_quietly(client)
            return

        self._pump_task = asyncio.create_task(self._pump(client, generation))

    async def dispatch(self, generation: int, event: SessionEvent) -> None:
        """Handle one event delivered by the session of the given generation."""
        if not self._state.is_current(generation):
            logging.debug(
                "Ignoring %s from stale session %d", type(event).__name__, generation
            )
            return

        if isinstance(event, JoinedEvent):
            self._handle_joined()
        elif isinstance(event, TextEvent):
            self._handle_text(generation, event)
        elif isinstance(event, KickEvent):
            self._handle_kick(generation, event)
        elif isinstance(event, ClosedEvent):
            detail = f" ({event.reason})" if event.reason else ""
            self.handle_disconnect(
                generation,
                f"Bot [{self._config.username}] lost connection to the server.{detail}",
            )
        elif isinstance(event, ErrorEvent):
            logging.error("Session error: %s", event.detail)
            if event.raw_packet:
                self._writer.write_raw(event.raw_packet)
            self.handle_disconnect(
                generation,
                f"Bot [{self._config.username}] was disconnected by an error. ({event.detail})",
            )
        elif isinstance(event, UnknownEvent):
            logging.debug("Unhandled packet %s", event.packet_name)

    def handle_disconnect(self, generation: int, narrative: Optional[str] = None) -> bool:
        """Move to DISCONNECTED and schedule a reconnect if enabled.

        Duplicate and stale signals are ignored: nothing happens when stopping,
        when the signal belongs to an older generation, when already
        disconnected, or when a reconnect is already scheduled.

        Args:
            generation: Session generation that reported the disconnect
            narrative: Line appended to the activity log if the transition happens

        Returns:
            True if the transition happened
        """
        state = self._state
        if not state.is_current(generation):
            return False
        if state.phase is ConnectionPhase.DISCONNECTED or state.retry_pending:
            logging.debug("Ignoring duplicate disconnect for session %d", generation)
            return False

        if narrative:
            self._writer.append(narrative)
        state.phase = ConnectionPhase.DISCONNECTED
        self._motd.cancel_all()
        self._discard_client()

        if state.retry_enabled:
            self._schedule_retry(generation)
        else:
            logging.info("Reconnect disabled, session %d is over", generation)
            self._wake()
        return True

    async def request_stop(self) -> None:
        """Shut down: leave the server, drop the connection, close the log.

        Each step is attempted even if an earlier one fails. Safe to call more
        than once.
        """
        if self._state.stopping:
            return
        logging.info("Stopping chat logger")
        self._state.stopping = True
        self._state.retry_pending = False
        _cancel_task(self._retry_task)
        self._retry_task = None
        self._motd.cancel_all()

        client = self._client
        self._client = None
        if client is not None:
            try:
                await client.disconnect()
            except Exception:
                logging.exception("Graceful disconnect failed")
            try:
                client.close()
            except Exception:
                logging.exception("Forceful close failed")
        _cancel_task(self._pump_task)
        self._pump_task = None

        try:
            self._writer.close()
        except Exception:
            logging.exception("Failed to close the activity log")

        self._state.phase = ConnectionPhase.IDLE
        self._wake()

    def _handle_joined(self) -> None:
        if self._state.phase is ConnectionPhase.CONNECTED:
            return
        self._state.phase = ConnectionPhase.CONNECTED
        config = self._config
        logging.info("Joined %s:%d as %s", config.host, config.port, config.username)
        self._writer.append(
            f"Bot [{config.username}] connected to {config.host}:{config.port}."
        )

    def _handle_text(self, generation: int, event: TextEvent) -> None:
        if self._config.raw:
            self._writer.write_raw(event.raw_packet)

        if event.kind is TextKind.TRANSLATION:
            key = normalize_locale_key(event.raw_message)
            if key == PLAYER_JOINED_KEY:
                self._state.player_joined()
                if event.parameters and self._client is not None:
                    self._motd.schedule(self._client, event.parameters[0], generation)
            elif key == PLAYER_LEFT_KEY:
                self._state.player_left()

        line = self._translator.translate(event)
        if line is not None:
            self._writer.append(line)

    def _handle_kick(self, generation: int, event: KickEvent) -> None:
        narrative = self._translator.translate_kick(self._config.username, event.reason)
        if narrative is None:
            logging.info("Kicked from server: %s", event.reason)
        self.handle_disconnect(generation, narrative)

    def _schedule_retry(self, generation: int) -> None:
        self._state.phase = ConnectionPhase.CONNECTING
        self._state.retry_pending = True
        logging.info("Reconnecting in %ss", self._state.retry_interval_secs)
        self._retry_task = asyncio.create_task(self._retry_after_interval(generation))

    async def _retry_after_interval(self, generation: int) -> None:
        await self._sleep(self._state.retry_interval_secs)

        if self._retry_task is asyncio.current_task():
            self._retry_task = None
            self._state.retry_pending = False
        if self._state.stopping:
            return
        if self._state.phase is ConnectionPhase.CONNECTED or self._state.generation != generation:
            logging.debug("Skipping stale reconnect for session %d", generation)
            return
        try:
            await self.connect()
        except Exception as e:
            # Surfaced by run(), e.g. the activity log became unwritable.
            logging.error("Reconnect failed: %s", e)
            self._failure = e
            self._wake()

    async def _pump(self, client: Any, generation: int) -> None:
        while True:
            try:
                event = await client.receive_event()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logging.warning("Receiving from session %d failed: %s", generation, e)
                event = ErrorEvent(raw_packet="", detail=str(e))
            self._events.put_nowait((generation, event))
            if isinstance(event, _TERMINAL_EVENTS):
                return

    def _cancel_retry(self) -> None:
        if self._retry_task is not None and self._retry_task is not asyncio.current_task():
            self._retry_task.cancel()
        self._retry_task = None
        self._state.retry_pending = False

    def _discard_client(self) -> None:
        if self._pump_task is not None and self._pump_task is not asyncio.current_task():
            self._pump_task.cancel()
        self._pump_task = None
        client = self._client
        self._client = None
        if client is not None:
            _close_quietly(client)

    def _finished(self) -> bool:
        state = self._state
        if state.stopping:
            return True
        return (
            state.phase is ConnectionPhase.DISCONNECTED
            and not state.retry_enabled
            and not state.retry_pending
        )

    def _wake(self) -> None:
        self._events.put_nowait(None)


def _cancel_task(task: Optional["asyncio.Task[None]"]) -> None:
    if task is not None and task is not asyncio.current_task():
        task.cancel()


def _close_quietly(client: Any) -> None:
    try:
        client.close()
    except Exception:
        logging.exception("Failed to close session client")
