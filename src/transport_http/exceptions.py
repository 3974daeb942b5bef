"""
Custom exceptions for transport_http.
"""

import asyncio
import ssl
from enum import Enum

import aiohttp


class ErrorKind(Enum):
    """Category of a failed execution."""

    CONFIGURATION = "configuration"  # Missing or malformed URI, bad options
    UNSUPPORTED_BODY = "unsupported_body"  # Body of a shape that cannot be encoded
    HTTP_STATUS = "http_status"  # Non-2xx response
    REJECTED = "rejected"  # process_response() returned False
    TRANSPORT = "transport"  # Connection, TLS or timeout failure
    UNEXPECTED = "unexpected"  # Anything else


class TransportError(Exception):
    """Base exception for all transport_http errors."""

    kind = ErrorKind.UNEXPECTED


class ConfigurationError(TransportError):
    """Raised when a request cannot be built from the configured options."""

    kind = ErrorKind.CONFIGURATION


class UnsupportedBodyError(TransportError):
    """
    Raised when the request body has a shape no encoder handles.

    Attributes:
        body_type: Name of the offending body type.
    """

    kind = ErrorKind.UNSUPPORTED_BODY

    def __init__(self, body_type: str):
        self.body_type = body_type
        super().__init__(f"Body of type {body_type} is not supported")


class HTTPStatusError(TransportError):
    """HTTP response with a non-success status code."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status: int, message: str, uri: str | None = None):
        self.status = status
        self.uri = uri
        if uri:
            super().__init__(f"Response status code does not indicate success: {status} ({message}) (uri={uri})")
        else:
            super().__init__(f"Response status code does not indicate success: {status} ({message})")


class ResponseRejectedError(TransportError):
    """Raised when response post-processing declines a successful response."""

    kind = ErrorKind.REJECTED


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised during execution to an ErrorKind."""
    if isinstance(exc, TransportError):
        return exc.kind
    if isinstance(exc, aiohttp.ClientError | ssl.SSLError | asyncio.TimeoutError):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNEXPECTED


def full_message(exc: BaseException) -> str:
    """
    Render an exception together with the chain of exceptions that caused it.

    Each link is rendered as its message, or as its type name when the message
    is empty (e.g. bare timeouts). Links are joined with " ---> ".
    """
    parts: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current)
        parts.append(text if text else type(current).__name__)
        current = current.__cause__ or current.__context__
    return " ---> ".join(parts)
