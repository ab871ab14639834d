"""Logging for failures that no coroutine is awaiting.

The API loop and every GigaChat worker loop get a handler that reports
orphaned task errors and unclosed resources through ``logging``, tagged with
the component that owns the loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

logger = logging.getLogger(__name__)


def make_loop_exception_handler(component: str):
    def _handle(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        message = context.get("message") or "unhandled error in event loop"
        exception = context.get("exception")
        logger.error(
            "[%s] %s",
            component,
            message,
            exc_info=exception if isinstance(exception, BaseException) else None,
            extra={"provider": component},
        )

    return _handle


def install_loop_exception_handler(loop: asyncio.AbstractEventLoop, component: str) -> None:
    """Route ``loop``'s unhandled errors to the ``askservice`` log."""
    loop.set_exception_handler(make_loop_exception_handler(component))


__all__ = ["install_loop_exception_handler", "make_loop_exception_handler"]
