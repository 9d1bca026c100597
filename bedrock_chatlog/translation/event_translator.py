"""Turns session events into human-readable activity log lines."""

from typing import Callable, Dict, Optional

from bedrock_chatlog.events.session_event import SessionEvent, TextEvent, TextKind
from bedrock_chatlog.translation.translation_table import (
    CONNECTION_TEMPLATES,
    DEATH_KEY_PREFIX,
    DEATH_REASONS,
    KICK_REASONS,
    entity_kind,
    normalize_locale_key,
)

MISSING_PLAYER = "?"


class EventTranslator:
    """Maps text events to at most one narrative line.

    Translation is pure: the same event always yields the same line and no
    state is kept between calls.
    """

    def __init__(self) -> None:
        self._kind_handlers: Dict[TextKind, Callable[[TextEvent], Optional[str]]] = {
            TextKind.CHAT: self._translate_chat,
            TextKind.ANNOUNCEMENT: self._translate_announcement,
            TextKind.TRANSLATION: self._translate_locale_key,
        }

    def translate(self, event: SessionEvent) -> Optional[str]:
        """Render an event as a log line.

        Args:
            event: Event received from the session

        Returns:
            The narrative line, or None for events that are not logged
        """
        if not isinstance(event, TextEvent):
            return None
        handler = self._kind_handlers.get(event.kind)
        if handler is None:
            return None
        return handler(event)

    def translate_kick(self, username: str, reason: str) -> Optional[str]:
        """Render a kick reason for the bot itself.

        Returns:
            The narrative line, or None if the reason is not a known kick code
        """
        fragment = KICK_REASONS.get(normalize_locale_key(reason))
        if fragment is None:
            return None
        return f"Bot [{username}] {fragment}. ({reason})"

    def _translate_chat(self, event: TextEvent) -> str:
        return f"[{event.speaker or MISSING_PLAYER}] {event.raw_message}"

    def _translate_announcement(self, event: TextEvent) -> str:
        return event.raw_message

    def _translate_locale_key(self, event: TextEvent) -> str:
        key = normalize_locale_key(event.raw_message)

        template = CONNECTION_TEMPLATES.get(key)
        if template is not None:
            return template.format(player=_player(event))

        if key.startswith(DEATH_KEY_PREFIX):
            return self._translate_death(key, event)

        return f"* {key}"

    def _translate_death(self, key: str, event: TextEvent) -> str:
        reason = DEATH_REASONS.get(key, key)
        if len(event.parameters) > 1:
            reason = f"{reason} caused by [{entity_kind(event.parameters[1])}]"
        return f"* [{_player(event)}] {reason}."


def _player(event: TextEvent) -> str:
    if event.parameters and event.parameters[0]:
        return event.parameters[0]
    return MISSING_PLAYER
