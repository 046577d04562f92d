"""Process wide sink for errors that cannot be returned to a caller.

Worker threads report reconcile failures here instead of raising them. Every
error is logged, then passed to each registered handler.
"""

from collections.abc import Callable
import logging
import threading

__all__ = [
    "handle_error",
    "add_error_handler",
]

_LOGGER = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], None]

_handlers: list[ErrorHandler] = []
_handlers_lock = threading.Lock()


def add_error_handler(handler: ErrorHandler) -> Callable[[], None]:
    """Register a handler called for every reported error.

    Returns a callable that can be called to remove the handler.
    """

    def remove() -> None:
        with _handlers_lock:
            if handler in _handlers:
                _handlers.remove(handler)

    with _handlers_lock:
        _handlers.append(handler)
    return remove


def handle_error(err: Exception) -> None:
    """Report an error to the log and to all registered handlers."""
    _LOGGER.error("%s", err)
    with _handlers_lock:
        handlers = list(_handlers)
    for handler in handlers:
        try:
            handler(err)
        except Exception:
            _LOGGER.exception("Error handler failed for %s", err)
