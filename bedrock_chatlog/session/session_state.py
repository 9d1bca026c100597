"""Mutable connection state owned by the session controller."""

from dataclasses import dataclass
from enum import Enum


class ConnectionPhase(Enum):
    """Connection lifecycle phases."""

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass
class SessionState:
    """State of the current session.

    Attributes:
        phase: Current connection phase
        retry_enabled: Reconnect after a disconnect
        retry_interval_secs: Fixed delay before each reconnect attempt
        present_player_count: Estimate of players online, derived from join
            and leave messages only; it is not reset on reconnect and may drift
        generation: Incremented for every fresh connection object; events and
            timers from older generations are ignored
        retry_pending: A reconnect attempt is scheduled and has not fired yet
        stopping: A stop was requested; no further transitions happen
    """

    phase: ConnectionPhase = ConnectionPhase.IDLE
    retry_enabled: bool = True
    retry_interval_secs: float = 30
    present_player_count: int = 0
    generation: int = 0
    retry_pending: bool = False
    stopping: bool = False

    def player_joined(self) -> None:
        self.present_player_count += 1

    def player_left(self) -> None:
        self.present_player_count = max(0, self.present_player_count - 1)

    def is_current(self, generation: int) -> bool:
        return not self.stopping and generation == self.generation
