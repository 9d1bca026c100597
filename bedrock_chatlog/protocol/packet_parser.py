import json
from typing import Any, Dict, Type

from absl import logging

from bedrock_chatlog.events.session_event import (
    ClosedEvent,
    ErrorEvent,
    JoinedEvent,
    KickEvent,
    SessionEvent,
    TextEvent,
    UnknownEvent,
)


class PacketParser:
    PACKET_TYPE_MAP: Dict[str, Type[SessionEvent]] = {
        "join": JoinedEvent,
        "spawn": JoinedEvent,
        "text": TextEvent,
        "kick": KickEvent,
        "disconnect": KickEvent,
        "close": ClosedEvent,
        "error": ErrorEvent,
    }

    def parse(self, raw_packet: str) -> SessionEvent:
        try:
            packet = json.loads(raw_packet)
        except json.JSONDecodeError as e:
            logging.warning("Undecodable packet from bridge: %s", e)
            return UnknownEvent(raw_packet=raw_packet)

        if not isinstance(packet, dict):
            logging.warning("Unexpected packet shape: %s", type(packet).__name__)
            return UnknownEvent(raw_packet=raw_packet)

        packet_name = packet.get("name")
        params: Any = packet.get("params") or {}
        if not isinstance(params, dict):
            params = {}

        event_class = self.PACKET_TYPE_MAP.get(str(packet_name))
        if event_class:
            return event_class.parse_packet(raw_packet, params)

        logging.debug("Unhandled packet type: %s", packet_name)
        return UnknownEvent(
            raw_packet=raw_packet,
            packet_name=str(packet_name) if packet_name is not None else None,
        )
