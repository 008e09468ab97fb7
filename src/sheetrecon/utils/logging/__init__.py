"""
Structured logging configuration for sheetrecon

Provides JSON-formatted or colored console logging with contextual
information.

Usage:
    from sheetrecon.utils.logging import setup_logging, get_logger

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/sheetrecon/app.log")

    logger = get_logger(__name__)
    logger.info("Reconciled", extra={"matched": 120, "left_only": 3})
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
