"""Activity log output."""

from bedrock_chatlog.output.rolling_log_writer import RollingLogWriter

__all__ = ["RollingLogWriter"]
