# Structured logging with correlation IDs

import logging
import os
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional, TextIO

import structlog

STDIO_MODE_ENV = "FEATHERS_MCP_STDIO_MODE"
LOG_FORMATS = ("json", "console")

# One id per request; set by the HTTP middleware or lazily on first use
correlation_id_ctx: ContextVar[Optional[str]] = ContextVar(
    "feathers_correlation_id", default=None
)


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str:
    """Return the current correlation ID, minting one if none is set."""
    current = correlation_id_ctx.get()
    if current is None:
        current = new_correlation_id()
        correlation_id_ctx.set(current)
    return current


def set_correlation_id(corr_id: str) -> None:
    correlation_id_ctx.set(corr_id)


def add_correlation_id(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """structlog processor; an id bound explicitly on the logger wins."""
    current = correlation_id_ctx.get()
    if current:
        event_dict.setdefault("correlation_id", current)
    return event_dict


def stdio_mode() -> bool:
    return os.environ.get(STDIO_MODE_ENV, "").lower() in {"1", "true", "yes", "on"}


def _processors(log_format: str) -> List[Any]:
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {log_format}")
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_correlation_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_logging(
    log_level: str = "INFO",
    stream: Optional[TextIO] = None,
    log_format: str = "json",
) -> None:
    """
    Route structlog through the stdlib root logger.

    Args:
        log_level: Standard level name
        stream: Where lines are written. Defaults to stdout, or stderr when
            FEATHERS_MCP_STDIO_MODE is set, since stdout then carries JSON-RPC.
        log_format: ``json`` for machine-readable lines, ``console`` for local
            development
    """
    processors = _processors(log_format)
    if stream is None:
        stream = sys.stderr if stdio_mode() else sys.stdout

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, log_level.upper()),
        force=True,
    )
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
