from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# uvicorn runs one server per listener; both log through these names.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_CONFIGURED = False


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def build_handler() -> logging.Handler:
    """Stdout handler rendering both structlog events and plain stdlib records as JSON lines."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route structlog and stdlib logging (uvicorn included) to one JSON handler.

    Only the first call has an effect.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    numeric_level = _resolve_level(level)

    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = build_handler()
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False
        server_logger.setLevel(numeric_level)

    _CONFIGURED = True
