"""
Logging utilities for the deadline library.
"""

import logging
import sys
from typing import Any

import structlog


def get_logger(name: str | None = None) -> Any:
    """
    Get a structlog logger that accepts key/value context.

    Events go to the standard library logger of the same name, so nothing is
    emitted until the application configures logging.

    Args:
        name: Logger name. Defaults to the package name

    Returns:
        A lazily bound structlog logger
    """
    return structlog.wrap_logger(logging.getLogger(name or "hother.deadline"))


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    dev_mode: bool = True,
) -> None:
    """
    Configure structlog and standard library logging.

    The library never calls this itself; applications opt in.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: Whether to render events as JSON
        dev_mode: Whether to use dev-friendly console output
    """
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    elif dev_mode:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=["event", "logger"])

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))

    root_logger = logging.getLogger()
    # Prevent duplicate handlers if called multiple times
    for existing in list(root_logger.handlers):
        if getattr(existing, "_hother_deadline", False):
            root_logger.removeHandler(existing)
    handler._hother_deadline = True
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))
