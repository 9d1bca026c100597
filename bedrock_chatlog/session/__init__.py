"""Session lifecycle: connection state machine, MOTD side channel and stop monitor."""

from bedrock_chatlog.session.liveness_monitor import LivenessMonitor
from bedrock_chatlog.session.session_controller import SessionController
from bedrock_chatlog.session.session_state import ConnectionPhase, SessionState

__all__ = ["ConnectionPhase", "LivenessMonitor", "SessionController", "SessionState"]
