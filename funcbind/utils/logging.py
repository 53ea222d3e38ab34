# funcbind/utils/logging.py
"""
Logging configuration for funcbind.
"""
import sys
import logging
from pathlib import Path
from typing import Dict, Optional

from loguru import logger
from funcbind.constants import LOG_DIR, LOG_FORMAT, LOG_ROTATION, LOG_RETENTION
from funcbind.utils.enhanced_logging import EnhancedLogger

# Dictionary to store enhanced logger instances
_enhanced_loggers: Dict[str, EnhancedLogger] = {}


class _InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logging(debug: bool = False, log_dir: Optional[Path] = None) -> None:
    """
    Configure the application logging.

    Args:
        debug: Whether to enable debug logging.
        log_dir: Directory for log files, defaults to the config log directory.
    """
    log_dir = Path(log_dir) if log_dir else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove default handlers
    logger.remove()

    # Console stays quiet unless debugging; rich handles user-facing output
    log_level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level="DEBUG" if debug else "WARNING",
        diagnose=debug,
    )

    log_file = log_dir / "funcbind.log"
    logger.add(
        log_file,
        format=LOG_FORMAT,
        level=log_level,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        compression="zip",
    )

    # Structured JSON log file
    json_log_file = log_dir / "funcbind_structured.log"
    logger.add(
        json_log_file,
        serialize=True,
        level=log_level,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        compression="zip",
    )

    # Route stdlib logging (used by EnhancedLogger) into the loguru sinks
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug(f"Logging initialized. Log files: {log_file}, {json_log_file}")


def get_logger(name: str = "funcbind") -> EnhancedLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: The name for the logger.

    Returns:
        An enhanced logger instance.
    """
    if name not in _enhanced_loggers:
        _enhanced_loggers[name] = EnhancedLogger(name)
    return _enhanced_loggers[name]
