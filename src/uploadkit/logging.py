"""
Structured logging for uploadkit, built on structlog
"""

import logging
import secrets
import sys
from typing import IO

import structlog

# Storage SDKs and the HTTP client log every request at INFO
_CHATTY_LOGGERS = ("aiobotocore", "botocore", "httpcore", "httpx", "hpack")


def configure_logging(
    debug: bool = False,
    level: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Route stdlib logging and structlog through one renderer.

    Args:
        debug: Human-readable console output at DEBUG instead of JSON lines.
        level: Explicit level name, overriding the one implied by ``debug``.
        stream: Output stream, stderr by default so CLI output stays clean.
    """
    if level is not None:
        log_level = logging.getLevelName(level.upper())
    else:
        log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        stream=stream or sys.stderr,
        format="%(message)s",
        force=True,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(log_level if debug else logging.WARNING)

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """16 hex characters, enough to correlate the log lines of one request."""
    return secrets.token_hex(8)


def set_request_context(request_id: str | None = None) -> str:
    """Bind a request id to every event logged in the current context.

    Returns the bound id, generated when none was supplied.
    """
    request_id = request_id or generate_request_id()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")
