"""Logging configuration with daily rotating JSON logs."""

import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "session_id": getattr(record, "session_id", None),
            "request_id": getattr(record, "request_id", None),
            "tool_name": getattr(record, "tool_name", None),
            "input_params": getattr(record, "input_params", None),
            "output_data": getattr(record, "output_data", None),
            "execution_time_ms": getattr(record, "execution_time_ms", None),
            "success": getattr(record, "success", None),
            "error": getattr(record, "error", None),
            "message": record.getMessage(),
        }

        # Remove None values to keep logs clean
        log_data = {k: v for k, v in log_data.items() if v is not None}

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    name: str = "manabase", log_dir: str = "logs", level: str = "INFO"
) -> logging.Logger:
    """
    Set up daily rotating JSON logging for a logger hierarchy.

    Args:
        name: Logger name (children such as 'manabase.simulation' inherit it)
        log_dir: Directory for log files, created if missing
        level: Logging level name

    Returns:
        The configured logger
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid stacking handlers when called more than once
    log_file = log_path / f"{name}.log"
    for existing in logger.handlers:
        if getattr(existing, "baseFilename", None) == os.path.abspath(log_file):
            return logger

    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=30,  # Keep 30 days of logs
        encoding="utf-8",
        utc=True,
    )
    handler.suffix = "%Y-%m-%d"
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    # Prevent duplicate logs from propagating to root logger
    logger.propagate = False

    return logger
