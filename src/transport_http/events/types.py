"""
Event types emitted by a transport during execution.

Per execution a transport emits, in order: a RequestEvent once the request is
built, a ResponseEvent once the exchange is over, then exactly one of
SuccessEvent or FailEvent.
"""

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from enum import Enum
from typing import Any

from ..exceptions import ErrorKind


class EventType(Enum):
    """Lifecycle notification points."""

    REQUEST = "request"  # Request built and about to be sent
    RESPONSE = "response"  # Response received, or the exchange failed
    SUCCESS = "success"  # Execution succeeded
    FAIL = "fail"  # Execution failed


@dataclass
class Event:
    """Base event with common fields."""

    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class RequestEvent(Event):
    """Rendered request log."""

    type: EventType = field(default=EventType.REQUEST)
    request: str = ""


@dataclass
class ResponseEvent(Event):
    """Rendered response log, or the failure message."""

    type: EventType = field(default=EventType.RESPONSE)
    response: str | None = None
    status_code: int | None = None


@dataclass
class SuccessEvent(Event):
    """Execution completed successfully."""

    type: EventType = field(default=EventType.SUCCESS)
    status_code: int | None = None


@dataclass
class FailEvent(Event):
    """Execution failed."""

    type: EventType = field(default=EventType.FAIL)
    message: str = ""
    kind: ErrorKind = ErrorKind.UNEXPECTED
    status_code: int | None = None
