"""Structured logging setup using structlog."""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

# Key names whose values never reach the log output.
SECRET_KEYS: frozenset[str] = frozenset({
    "password",
    "client_secret",
    "token",
    "access_token",
    "oauth-token",
    "authorization",
})


def redact_secrets(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask credential-bearing keys, including inside nested dicts."""
    return _redact(event_dict)


def _redact(data: MutableMapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in SECRET_KEYS:
            result[key] = "[REDACTED]"
        elif isinstance(value, MutableMapping):
            result[key] = _redact(value)
        else:
            result[key] = value
    return result


def setup_logging(level: str = "INFO", format: str = "console") -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ERROR).
        format: ``"json"`` for machine-readable output, anything else for
            the colourless console renderer.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]
    if format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    level_num = logging.getLevelName(level.upper())
    if not isinstance(level_num, int):
        level_num = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
