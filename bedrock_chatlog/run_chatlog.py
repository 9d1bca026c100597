"""Main script for logging the activity of a Minecraft Bedrock server.

This script joins the server as a bot through the protocol bridge, writes
chat, announcements, joins, leaves and deaths to a daily log file, reconnects
when the connection drops, and exits cleanly once the stop file appears.

Example:
    python -m bedrock_chatlog.run_chatlog --host 10.0.0.5 --port 19132
"""

import asyncio
from typing import List

from absl import app, flags, logging

from bedrock_chatlog.config import (
    DEFAULT_BRIDGE_URL,
    DEFAULT_LOG_DIR,
    DEFAULT_PORT,
    DEFAULT_PREFIX,
    DEFAULT_RETRY_INTERVAL_SECS,
    DEFAULT_USERNAME,
    STOP_FILE_NAME,
    ChatlogConfig,
)
from bedrock_chatlog.exceptions import ConfigurationError
from bedrock_chatlog.output.rolling_log_writer import RollingLogWriter
from bedrock_chatlog.protocol.bedrock_client import BedrockClient
from bedrock_chatlog.session.liveness_monitor import LivenessMonitor
from bedrock_chatlog.session.session_controller import SessionController

FLAGS = flags.FLAGS

# Connection settings
flags.DEFINE_string("host", None, "Address of the Bedrock server")
flags.DEFINE_integer("port", DEFAULT_PORT, "Port of the Bedrock server")
flags.DEFINE_string("username", DEFAULT_USERNAME, "Display name of the bot")
flags.DEFINE_bool(
    "offline",
    True,
    "Join in offline mode (requires online-mode=false on the server)",
)
flags.DEFINE_string(
    "bridge_url",
    DEFAULT_BRIDGE_URL,
    "WebSocket URL of the Bedrock protocol bridge",
)

# Log output
flags.DEFINE_string("log_folder", DEFAULT_LOG_DIR, "Directory for the daily log files")
flags.DEFINE_string("prefix", DEFAULT_PREFIX, "Log file name prefix")
flags.DEFINE_bool("raw", False, "Also log raw text packets as JSON")

# Reconnect
flags.DEFINE_bool("retry", True, "Reconnect after being kicked or disconnected")
flags.DEFINE_integer(
    "retry_interval",
    DEFAULT_RETRY_INTERVAL_SECS,
    "Seconds to wait before each reconnect attempt",
)

# Message of the day
flags.DEFINE_string("motd", None, "Whispered to every player who joins")
flags.DEFINE_string(
    "alone_motd",
    None,
    "Whispered to a joining player when nobody else is online",
)

flags.DEFINE_string(
    "stop_file",
    STOP_FILE_NAME,
    "The logger shuts down when this file appears and then deletes it",
)


def build_config() -> ChatlogConfig:
    """Build the validated configuration from the parsed flags.

    Raises:
        ConfigurationError: If a flag value is missing or invalid
    """
    return ChatlogConfig(
        host=FLAGS.host or "",
        port=FLAGS.port,
        username=FLAGS.username,
        offline=FLAGS.offline,
        log_dir=FLAGS.log_folder,
        prefix=FLAGS.prefix,
        raw=FLAGS.raw,
        retry=FLAGS.retry,
        retry_interval_secs=FLAGS.retry_interval,
        motd=FLAGS.motd or None,
        alone_motd=FLAGS.alone_motd or None,
        bridge_url=FLAGS.bridge_url,
        stop_file=FLAGS.stop_file,
    ).validate()


async def run_chatlog(config: ChatlogConfig) -> None:
    """Run the session controller and the stop monitor until shutdown."""
    writer = RollingLogWriter(config.log_dir, config.prefix)
    controller = SessionController(
        config,
        client_factory=lambda: BedrockClient(config.bridge_url),
        writer=writer,
    )
    monitor = LivenessMonitor(controller, config.stop_file)
    monitor_task = asyncio.create_task(monitor.run())

    try:
        await controller.run()
    finally:
        await controller.request_stop()
        monitor_task.cancel()
        try:
            await monitor_task
        except asyncio.CancelledError:
            pass
    logging.info("Chat logger stopped")


def main(argv: List[str]) -> None:
    """Entry point for the script."""
    if len(argv) > 1:
        raise app.UsageError(f"Unexpected arguments: {' '.join(argv[1:])}")

    try:
        config = build_config()
    except ConfigurationError as e:
        raise app.UsageError(str(e))

    logging.set_verbosity(logging.INFO)
    logging.info("Starting run_chatlog script")
    logging.info("Server: %s:%d", config.host, config.port)
    logging.info("Log files: %s/%s<date>.log", config.log_dir, config.prefix)

    try:
        asyncio.run(run_chatlog(config))
    except KeyboardInterrupt:
        logging.info("Interrupted by user")


def run() -> None:
    """Console script entry point."""
    flags.mark_flag_as_required("host")
    app.run(main)


if __name__ == "__main__":
    run()
