"""
Async event channel with ordered handler invocation.
"""

import inspect
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Generic
from typing import TypeVar

from .types import Event

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Event)

# Handlers may be plain functions or coroutine functions
EventHandler = Callable[[E], Awaitable[None] | None]


class AsyncEvent(Generic[E]):
    """
    A subscribable notification point.

    Handlers run sequentially in registration order. Async handlers are
    awaited; sync handlers are called directly. A handler that raises is
    logged and skipped so the remaining handlers still run.

    Example:
        on_success: AsyncEvent[SuccessEvent] = AsyncEvent("on_success")

        @on_success.add_handler
        async def notify(event: SuccessEvent) -> None:
            ...

        await on_success.emit(SuccessEvent(status_code=200))
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: list[EventHandler[E]] = []

    def add_handler(self, handler: EventHandler[E]) -> EventHandler[E]:
        """Subscribe a handler. Returns it so this can be used as a decorator."""
        self._handlers.append(handler)
        return handler

    def remove_handler(self, handler: EventHandler[E]) -> None:
        """Unsubscribe a handler; unknown handlers are ignored."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    def __len__(self) -> int:
        return len(self._handlers)

    async def emit(self, event: E) -> None:
        """Deliver an event to every handler."""
        for handler in list(self._handlers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Handler {handler!r} for {self.name} failed")
