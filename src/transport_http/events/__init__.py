"""Lifecycle events emitted by transports."""

from .emitter import AsyncEvent
from .emitter import EventHandler
from .types import Event
from .types import EventType
from .types import FailEvent
from .types import RequestEvent
from .types import ResponseEvent
from .types import SuccessEvent

__all__ = [
    "AsyncEvent",
    "Event",
    "EventHandler",
    "EventType",
    "FailEvent",
    "RequestEvent",
    "ResponseEvent",
    "SuccessEvent",
]
