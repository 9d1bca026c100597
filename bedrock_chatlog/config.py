"""Runtime configuration for the chat logger."""

from dataclasses import dataclass
from typing import Optional

from bedrock_chatlog.exceptions import ConfigurationError

DEFAULT_PORT = 19132
DEFAULT_USERNAME = "Server"
DEFAULT_LOG_DIR = "./logs"
DEFAULT_PREFIX = "chat-"
DEFAULT_RETRY_INTERVAL_SECS = 30
DEFAULT_BRIDGE_URL = "ws://localhost:8765"
STOP_FILE_NAME = "chatlog.stop"


@dataclass(frozen=True)
class ChatlogConfig:
    """Settings shared by the session controller, log writer and monitor."""

    host: str
    port: int = DEFAULT_PORT
    username: str = DEFAULT_USERNAME
    offline: bool = True
    log_dir: str = DEFAULT_LOG_DIR
    prefix: str = DEFAULT_PREFIX
    raw: bool = False
    retry: bool = True
    retry_interval_secs: float = DEFAULT_RETRY_INTERVAL_SECS
    motd: Optional[str] = None
    alone_motd: Optional[str] = None
    bridge_url: str = DEFAULT_BRIDGE_URL
    stop_file: str = STOP_FILE_NAME

    def validate(self) -> "ChatlogConfig":
        """Check the settings, returning self so calls can be chained.

        Raises:
            ConfigurationError: If a setting is missing or out of range
        """
        if not self.host or not self.host.strip():
            raise ConfigurationError("host", "a server address is required")
        if not 0 < self.port < 65536:
            raise ConfigurationError("port", f"{self.port} is not a valid port")
        if not self.username:
            raise ConfigurationError("username", "must not be empty")
        if self.retry_interval_secs <= 0:
            raise ConfigurationError(
                "retry_interval", f"must be positive, got {self.retry_interval_secs}"
            )
        return self
