"""Structured logging setup built on structlog."""

import logging
import os
from typing import Any, Optional

import structlog

from cloudcontrol_provider._package import PACKAGE_NAME

_SHARED_PROCESSORS: list[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def setup_logging(
    log_level: Optional[str] = None,
    log_destination: Optional[str] = None,
    log_dir: Optional[str] = None,
    log_filename: Optional[str] = None,
) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the provider using structlog.

    :param log_level: Logging level (e.g., DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :param log_destination: Where to send logs ("file", "stdout", or "both").
    :param log_dir: Directory where the log file will be stored.
    :param log_filename: Name of the log file.
    :return: Configured structlog logger for the package.
    """
    log_level = log_level or os.environ.get("CLOUDCONTROL_LOG_LEVEL", "INFO")
    log_destination = log_destination or os.environ.get("CLOUDCONTROL_LOG_DESTINATION", "stdout")
    log_dir = log_dir or os.environ.get("CLOUDCONTROL_LOG_DIR", "./logs")
    log_filename = log_filename or f"{PACKAGE_NAME}.log"

    if log_destination not in ("file", "stdout", "both"):
        raise ValueError(f"Unsupported log destination: {log_destination}")

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )

    handlers: list[logging.Handler] = []
    if log_destination in ("file", "both"):
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, log_filename)))
    if log_destination in ("stdout", "both"):
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for old_handler in list(root_logger.handlers):
        root_logger.removeHandler(old_handler)
        old_handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return structlog.get_logger(PACKAGE_NAME)


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
