"""Structured logging for HeartSpace services."""

import logging
import json
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service_name", record.name),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            log_data["exception"] = self.formatException(record.exc_info)
        # Add any extra fields
        for key in ("session_id", "user_id", "topic", "endpoint", "duration_ms"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        return json.dumps(log_data)


def setup_logging(service_name: str, level: int = logging.INFO, json_output: bool = False) -> logging.Logger:
    """Set up logging for a service.

    Args:
        service_name: Name of the service (e.g., "heartbot", "accounts")
        level: Logging level
        json_output: If True, use JSON format. If False, use human-readable format.

    Returns:
        Configured logger
    """
    logger = logging.getLogger(f"heartspace.{service_name}")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        if json_output:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter(
                f"%(asctime)s [{service_name}] %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))

        logger.addHandler(handler)

    return logger


def configure_root(level: str = "INFO", json_output: bool = False) -> None:
    """Apply the configured level and format to every heartspace.* logger."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    parent = logging.getLogger("heartspace")
    parent.setLevel(numeric)
    for name, logger in logging.root.manager.loggerDict.items():
        if not name.startswith("heartspace.") or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)
            if json_output:
                handler.setFormatter(JSONFormatter())
