"""
Logging configuration for the TXF converter.
Row skips and unmapped categories are reported here, never raised.
"""
import logging
import os
import sys
from typing import Dict, Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers handed out by setup_logger, by name
_loggers: Dict[str, logging.Logger] = {}


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance.
    
    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env LOG_LEVEL or INFO.
    
    Returns:
        Configured logger instance
    """
    numeric_level = _resolve_level(level)
    
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    
    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    
    _loggers[name] = logger
    return logger


def set_log_level(level: str) -> None:
    """
    Apply a level to every logger created so far.
    
    Modules create their loggers at import time, before settings are loaded,
    so the configured level is pushed to them afterwards.
    """
    numeric_level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(numeric_level)
