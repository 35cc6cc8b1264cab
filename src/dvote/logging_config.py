"""Structured logging setup with structlog.

Library modules only ever call ``structlog.get_logger(__name__)``;
applications (or the CLI) call ``configure_logging`` once at startup.

    configure_logging(Settings.from_env())
    log = structlog.get_logger(__name__)
    log.info("process_encoded", shape="std")
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import Processor

from dvote.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog output format and level from settings."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.log_format == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    level = getattr(logging, settings.log_level, logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
