"""Structured logging configuration for the Ordem Paranormal rules engine.

This module configures engine-wide logging using structlog. Engine modules
log roll outcomes at debug level and state transitions (conditions gained,
death, ritual outcomes) at info level, so a calling service can trace a
whole turn from its own log stream.

Example:
    >>> from ordem_rules.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Condition applied", condition="caido", character="Dante")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from structlog.types import EventDict, WrappedLogger

    from ordem_rules.core.config import Settings


def add_engine_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add engine context to log entries.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary tagged with the engine name.
    """
    event_dict["app"] = "ordem_rules"
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure engine-wide logging.

    Sets up structlog with either a human-readable console renderer or a
    JSON renderer, and routes standard library logging to the same stream.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output logs in JSON format.
        log_file: Optional path to a log file for persistent logging.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_engine_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def configure_from_settings(settings: Settings) -> None:
    """Configure logging from the engine settings.

    Args:
        settings: Loaded engine settings.
    """
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.json_logs,
        log_file=settings.log_file,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional name for the logger (typically __name__).

    Returns:
        A configured structlog BoundLogger instance.
    """
    return structlog.get_logger(name)


def character_context(name: str) -> AbstractContextManager[None]:
    """Tag every log line emitted inside the block with a character name.

    Turn processing and ritual casting wrap their work in this, so the
    condition and sanity events logged deeper down carry the character
    too. The previous context is restored on exit, including on errors.

    Args:
        name: The character being resolved.

    Example:
        >>> with character_context("Dante"):
        ...     logger.info("Condition applied", condition="caido")
    """
    return structlog.contextvars.bound_contextvars(character=name)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "character_context",
]
