"""Structured logging for Hookline.

Events are rendered by structlog and written through the "hookline"
standard library logger, leaving the root logger to the host application.
Level and format default to HOOKLINE_LOG_LEVEL and HOOKLINE_LOG_FORMAT.

Delivery-scoped fields such as webhook_id and schedule_id are kept in
structlog contextvars. Everything logged inside a delivery_context() block
carries them, including events from tasks started inside the block.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

from hookline.config import settings

if TYPE_CHECKING:
    from structlog.typing import Processor

ROOT_LOGGER_NAME = "hookline"

_configured = False
_handler: logging.Handler | None = None


def _renderer(format: str) -> list[Processor]:
    if format.lower() == "json":
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(level: str | None = None, format: str | None = None) -> None:
    """Configure structured logging for Hookline.

    Safe to call more than once; the handler installed by a previous call
    is replaced rather than stacked.

    Args:
        level: Log level name. Defaults to settings.log_level. Unknown
            names fall back to INFO.
        format: "json" for production, "text" for a readable console.
            Defaults to settings.log_format.

    Example:
        ```python
        from hookline.logging import configure_logging, get_logger

        configure_logging(level="DEBUG", format="text")
        get_logger(__name__).info("Dispatcher started", timeout_seconds=10)
        ```
    """
    global _configured, _handler

    level = level or settings.log_level
    format = format or settings.log_format
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(log_level)
    root.propagate = False
    _handler = handler

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            *_renderer(format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring logging on first use.

    Args:
        name: Dotted logger name, normally __name__. Defaults to "hookline".
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name or ROOT_LOGGER_NAME)  # type: ignore[no-any-return]


@contextmanager
def delivery_context(**fields: object) -> Iterator[None]:
    """Attach fields to every log event emitted inside the block.

    Fields whose value is None are skipped. Earlier values of the same keys
    are restored on exit.

    Example:
        ```python
        with delivery_context(webhook_id="whk_123"):
            logger.info("Webhook delivered")  # carries webhook_id
        ```
    """
    bound = {key: value for key, value in fields.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield
