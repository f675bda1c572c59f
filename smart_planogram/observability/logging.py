"""Structured logging configuration for the Smart Planogram backend."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict

import structlog

from smart_planogram.enterprise.config.settings import LoggingSettings


def _build_structlog_processors(json_output: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def configure_logging(settings: LoggingSettings) -> None:
    """Route stdlib and structlog output through one stdout handler."""

    level = getattr(logging, settings.level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # uvicorn's access log duplicates the request events bound below
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=_build_structlog_processors(settings.json),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def bind_request_context(reset: bool = False, **context: Any) -> Dict[str, Any]:
    """Attach request-scoped fields (request id, caller) to every log line."""

    if reset:
        structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    return context
