"""Structlog configuration for the application.

Events are rendered as colored console lines in development and as JSON
in production. Request, tenant and principal identifiers are merged in
from structlog context variables, which the request middleware and the
tenant resolver bind.
"""

import logging
import os
import sys

import structlog

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _wants_colors() -> bool:
    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    if os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes"):
        return True
    return sys.stdout.isatty()


def _renderer(use_colors: bool) -> list[structlog.types.Processor]:
    if use_colors:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Minimum level name to emit (e.g. "INFO")
    """
    level = logging.getLevelName(log_level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *_renderer(_wants_colors()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Library warnings (e.g. SQLAlchemy) still reach stdout
    logging.basicConfig(level=level, format="%(levelname)s %(name)s %(message)s")
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
