"""WebSocket client for a Bedrock protocol bridge.

The bridge wraps the Bedrock protocol library (handshake, encryption, RakNet
framing) and relays its high-level events as JSON packets of the form
{"name": <packet name>, "params": {...}}.
"""

import json
from typing import Any, Dict, Optional

import websockets
from websockets.exceptions import ConnectionClosed
from absl import logging

from bedrock_chatlog.events.session_event import ClosedEvent, SessionEvent
from bedrock_chatlog.exceptions import BridgeProtocolError, NotConnectedError
from bedrock_chatlog.protocol.packet_parser import PacketParser


class BedrockClient:
    """Client for opening and observing a single Bedrock game session."""

    def __init__(self, bridge_url: str, parser: Optional[PacketParser] = None) -> None:
        self._bridge_url = bridge_url
        self._parser = parser or PacketParser()
        self._ws: Optional[Any] = None
        self._target: str = ""

    async def connect(
        self, host: str, port: int, username: str, offline: bool = True
    ) -> None:
        """Open the bridge connection and ask it to join the game server.

        Args:
            host: Game server address
            port: Game server port
            username: Display name of the bot
            offline: Use offline (unauthenticated) mode
        """
        self._target = f"{host}:{port}"
        logging.info(
            "Connecting to %s as %s via bridge %s", self._target, username, self._bridge_url
        )
        self._ws = await websockets.connect(self._bridge_url)
        logging.info("Bridge connection established")

        await self._send_packet(
            "connect",
            {"host": host, "port": port, "username": username, "offline": offline},
        )

    async def receive_event(self) -> SessionEvent:
        """Receive the next session event.

        A transport-level close is reported as a ClosedEvent instead of raising.

        Raises:
            NotConnectedError: If connect() has not succeeded
            BridgeProtocolError: If the bridge sends a binary frame that is not UTF-8
        """
        if self._ws is None:
            raise NotConnectedError("receive events")
        try:
            message = await self._ws.recv()
        except ConnectionClosed as e:
            logging.info("Bridge connection to %s closed: %s", self._target, e)
            self._ws = None
            return ClosedEvent(raw_packet="", reason=str(e))

        if isinstance(message, bytes):
            try:
                message = message.decode("utf-8")
            except UnicodeDecodeError as e:
                raise BridgeProtocolError(str(e), payload=repr(message)) from e
        return self._parser.parse(str(message))

    async def send_command(self, command: str) -> None:
        """Send a chat command (e.g. a whisper) as the bot."""
        await self._send_packet("command_request", {"command": command})

    async def disconnect(self) -> None:
        """Leave the game server and close the bridge connection."""
        if self._ws is not None:
            await self._send_packet("disconnect", {})
            await self._ws.close()
            logging.info("Disconnected from %s", self._target)
            self._ws = None

    def close(self) -> None:
        """Drop the bridge connection without any handshake."""
        if self._ws is not None:
            ws = self._ws
            self._ws = None
            ws.transport.abort()
            logging.info("Connection to %s aborted", self._target)

    async def _send_packet(self, name: str, params: Dict[str, Any]) -> None:
        if self._ws is None:
            raise NotConnectedError(f"send {name}")
        await self._ws.send(json.dumps({"name": name, "params": params}))

    @property
    def is_connected(self) -> bool:
        """Check if the bridge connection is open."""
        return self._ws is not None
