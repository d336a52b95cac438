"""structlog setup.

Every event carries the request id of the HTTP request that produced it,
plus the service name and environment, so a failed report can be traced
from the problem document back to the query that broke.
"""

import logging
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, TextIO

import structlog
from structlog.types import Processor, WrappedLogger

from app.core.config import get_settings

EventDict = MutableMapping[str, Any]

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def add_request_id(_logger: WrappedLogger, _method_name: str, event_dict: EventDict) -> EventDict:
    """Copy the current request id into the event, when inside a request."""
    request_id = request_id_ctx.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_name(_logger: WrappedLogger, _method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the application name and environment."""
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("env", settings.app_env)
    return event_dict


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(stream: TextIO | None = None) -> None:
    """Configure structlog for the application.

    Args:
        stream: Where events are printed (defaults to stdout). The export
            script passes stderr so CSV on stdout stays clean.
    """
    settings = get_settings()
    level = logging.getLevelNamesMapping()[settings.log_level]

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            add_request_id,
            add_service_name,
            structlog.processors.format_exc_info,
            _renderer(settings.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger named after the calling module."""
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
