"""Events delivered by the protocol bridge for a single game session."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TextKind(Enum):
    """Bedrock text packet types."""

    RAW = "raw"
    CHAT = "chat"
    TRANSLATION = "translation"
    POPUP = "popup"
    JUKEBOX_POPUP = "jukebox_popup"
    TIP = "tip"
    SYSTEM = "system"
    WHISPER = "whisper"
    ANNOUNCEMENT = "announcement"
    JSON_WHISPER = "json_whisper"
    JSON = "json"
    JSON_ANNOUNCEMENT = "json_announcement"
    UNKNOWN = "unknown"

    @classmethod
    def from_protocol(cls, protocol_str: Optional[str]) -> "TextKind":
        """Parse a text type from the packet's "type" field.

        Unrecognized or missing types map to UNKNOWN rather than raising.
        """
        for kind in cls:
            if kind.value == protocol_str:
                return kind
        return cls.UNKNOWN


class SessionEvent(ABC):
    @classmethod
    @abstractmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "SessionEvent":
        pass


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class JoinedEvent(SessionEvent):
    """The bot has joined the server and the session is usable."""

    raw_packet: str

    @classmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "JoinedEvent":
        return cls(raw_packet=raw_packet)


@dataclass(frozen=True)
class TextEvent(SessionEvent):
    """A chat line, announcement or locale-coded game message.

    Attributes:
        raw_packet: JSON text of the packet as received
        kind: Text packet type
        speaker: Display name of the originating actor, if any
        raw_message: Locale key (translation) or literal text
        parameters: Positional substitution values; index 0 is the affected
            player, index 1 (if present) the secondary cause
    """

    raw_packet: str
    kind: TextKind
    speaker: Optional[str]
    raw_message: str
    parameters: Tuple[str, ...] = ()

    @classmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "TextEvent":
        raw_parameters = params.get("parameters") or []
        if not isinstance(raw_parameters, (list, tuple)):
            raw_parameters = [raw_parameters]
        speaker = _optional_str(params.get("source_name")) or None
        return cls(
            raw_packet=raw_packet,
            kind=TextKind.from_protocol(params.get("type")),
            speaker=speaker,
            raw_message=str(params.get("message") or ""),
            parameters=tuple(str(p) for p in raw_parameters),
        )


@dataclass(frozen=True)
class KickEvent(SessionEvent):
    """The server removed the bot; reason is a locale key or literal text."""

    raw_packet: str
    reason: str

    @classmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "KickEvent":
        return cls(raw_packet=raw_packet, reason=str(params.get("message") or ""))


@dataclass(frozen=True)
class ClosedEvent(SessionEvent):
    raw_packet: str
    reason: str = ""

    @classmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "ClosedEvent":
        return cls(raw_packet=raw_packet, reason=str(params.get("reason") or ""))


@dataclass(frozen=True)
class ErrorEvent(SessionEvent):
    """Event for errors reported by the bridge or raised by the transport."""

    raw_packet: str
    detail: str

    @classmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "ErrorEvent":
        detail = params.get("message") or params.get("detail") or raw_packet
        return cls(raw_packet=raw_packet, detail=str(detail))


@dataclass(frozen=True)
class UnknownEvent(SessionEvent):
    raw_packet: str
    packet_name: Optional[str] = None

    @classmethod
    def parse_packet(cls, raw_packet: str, params: Dict[str, Any]) -> "UnknownEvent":
        return cls(raw_packet=raw_packet)
