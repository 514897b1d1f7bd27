"""Structlog wiring shared by the web app and the CLI."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import structlog
from litestar.logging.config import default_structlog_processors, default_structlog_standard_lib_processors

if TYPE_CHECKING:
    from litestar.types import ASGIApp, Receive, Scope, Send
    from structlog.types import Processor

logger = structlog.get_logger()


def is_tty() -> bool:
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def structlog_processors(as_json: bool = True) -> list[Processor]:
    """Processors for loggers created with ``structlog.get_logger``."""
    return default_structlog_processors(as_json=as_json)


def stdlib_logger_processors(as_json: bool = True) -> list[Processor]:
    """Processors for the stdlib ``ProcessorFormatter``."""
    return default_structlog_standard_lib_processors(as_json=as_json)


class StructlogMiddleware:
    """Reset structlog context variables for every request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        structlog.contextvars.clear_contextvars()
        if scope["type"] == "http":
            structlog.contextvars.bind_contextvars(path=scope.get("path"), method=scope.get("method"))
        await self.app(scope, receive, send)


async def after_exception_hook_handler(exc: Exception, _scope: Scope) -> None:
    """Log exceptions that escape route handlers."""
    logger.exception("Unhandled application error", exc_type=type(exc).__name__)
