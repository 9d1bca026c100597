"""Custom exceptions for chat logger errors."""

from typing import Optional


class ConfigurationError(Exception):
    """Exception raised when the chat logger is started with invalid settings.

    Raised by ChatlogConfig.validate() before any network activity. The entry
    point converts it into a usage error so the process exits non-zero.

    Attributes:
        option: Name of the offending option
        reason: Human readable description of the problem
    """

    def __init__(self, option: str, reason: str):
        """Initialize the ConfigurationError.

        Args:
            option: Name of the offending option
            reason: Description of what is wrong with it
        """
        self.option = option
        self.reason = reason
        super().__init__(f"Invalid --{option}: {reason}")


class BridgeProtocolError(Exception):
    """Exception raised when the protocol bridge sends something unusable.

    Attributes:
        detail: Description of the malformed or unexpected payload
        payload: The raw payload, if one was received
    """

    def __init__(self, detail: str, payload: Optional[str] = None):
        """Initialize the BridgeProtocolError.

        Args:
            detail: Description of the problem
            payload: Raw payload received from the bridge
        """
        self.detail = detail
        self.payload = payload
        super().__init__(f"Bridge protocol error: {detail}")


class NotConnectedError(RuntimeError):
    """Exception raised when a session operation needs an open connection."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Not connected to server (while trying to {operation})")
