"""
Logging setup for the API process.

Console logging always; a daily file under ``LOG_DIR`` when it is set. Store
failures are logged through ``log_store_error`` so they read the same
wherever they surface.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger("clientdesk")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure root logging for the application.

    Args:
        level: Name of the log level, e.g. "INFO"
        log_dir: Directory for daily log files; no file logging when empty
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )
    if log_dir:
        setup_file_logging(log_dir)

def setup_file_logging(log_dir: str = "logs") -> logging.FileHandler:
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # clientdesk_20261019.log
    timestamp = datetime.now().strftime("%Y%m%d")
    file_handler = logging.FileHandler(
        log_path / f"clientdesk_{timestamp}.log",
        encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    return file_handler

def log_store_error(context: str, error: Exception, log: Optional[logging.Logger] = None) -> None:
    """
    Log a failed store operation, with the stack trace at debug level.

    Args:
        context: What was being attempted, e.g. "Failed to record payment"
        error: The error raised by the store client
        log: Logger of the calling module; the package logger by default
    """
    log = log or logger
    log.error(f"{context}: {getattr(error, 'message', None) or error}")
    log.debug("Stack trace:", exc_info=error)
