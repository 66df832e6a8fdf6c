"""
Logging setup for swiftscaffold.

Generated code is written to stdout, so every log line goes to stderr:
structlog events as colored key=value pairs in a terminal and as JSON lines
under an editor host or CI, and stdlib records from the service SDKs through
a rich handler.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config

# SDK loggers that report every request at INFO.
SERVICE_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def setup_logging(config: Config | None = None) -> None:
    """Configure structlog and stdlib logging on stderr.

    Safe to call more than once; the last call wins.

    Args:
        config: Optional configuration. If None, uses INFO level.
    """
    log_level = config.log_level if config else "INFO"
    level = getattr(logging, log_level, logging.INFO)
    debug = level <= logging.DEBUG

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
    for name in SERVICE_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else max(level, logging.WARNING))

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if sys.stderr.isatty():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically for ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind key-value pairs to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
