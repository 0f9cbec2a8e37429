"""
Configures structured logging for the application using structlog.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, List, Optional

import structlog

if TYPE_CHECKING:
    from ..config.config import MonitoringConfig


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_output: bool = False,
) -> None:
    """
    Route structlog and stdlib logging through one handler.

    Console output goes to stderr so extracted text on stdout stays clean.
    A ``log_file`` switches to structured JSON lines in that file.
    """
    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: Any
    handler: logging.Handler
    if log_file:
        renderer = structlog.processors.JSONRenderer()
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logger = structlog.get_logger("distillery.logging")
    logger.debug("logging_configured", level=level.upper(), output=log_file or "stderr")


def configure_from_settings(config: MonitoringConfig, level: Optional[str] = None) -> None:
    """Apply a ``MonitoringConfig``; ``level`` overrides its log level."""
    configure_logging(level or config.log_level, config.log_file, config.json_logs)
