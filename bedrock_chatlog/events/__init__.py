"""Session events delivered by the protocol bridge."""

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

__all__ = [
    "ClosedEvent",
    "ErrorEvent",
    "JoinedEvent",
    "KickEvent",
    "SessionEvent",
    "TextEvent",
    "TextKind",
    "UnknownEvent",
]
