"""Centralized logging configuration."""
import logging
import os
import sys
from typing import Optional


_logging_configured = False

LOG_LEVEL_ENV = "TF_LOG"

_LEVELS = {
    "TRACE": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve the log level from TF_LOG, falling back to `default`."""
    value = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    return _LEVELS.get(value, default)


def is_debug_or_higher() -> bool:
    """True when TF_LOG asks for debug (or trace) output."""
    return level_from_env(logging.INFO) <= logging.DEBUG


def setup_logging(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the application.
    
    Args:
        level: Logging level. If None, resolved from TF_LOG.
        format_string: Custom format string. If None, uses default.
        datefmt: Date format string. If None, uses default.
        force: If True, reconfigure even if already configured.
    """
    global _logging_configured
    
    if _logging_configured and not force:
        return
    
    if level is None:
        level = level_from_env()
    
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    
    if datefmt is None:
        datefmt = "%Y-%m-%d %H:%M:%S"
    
    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=datefmt,
        stream=sys.stderr,
        force=force,
    )
    
    # botocore is very chatty at DEBUG
    if not is_debug_or_higher():
        for name in ("botocore", "boto3", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)
    
    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        Logger instance
    """
    if not _logging_configured:
        setup_logging()
    
    return logging.getLogger(name)
