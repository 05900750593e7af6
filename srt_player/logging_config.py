"""Logging configuration with JSON formatting for production."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging based on environment.

    In production: structured JSON logs to stderr
    In development: human-readable logs to stderr

    Logs go to stderr so they never interleave with the subtitle display.
    """
    env = os.environ.get("SRT_PLAYER_ENV", "development").lower()
    is_production = env in ("production", "prod", "staging")

    level_name = (level or os.environ.get("SRT_PLAYER_LOG_LEVEL", "WARNING")).upper()
    log_level = getattr(logging, level_name, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)

    if is_production:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Per-connection chatter from the broadcast server
    logging.getLogger("websockets").setLevel(logging.WARNING)
