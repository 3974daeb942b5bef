"""
transport_http - a thin async HTTP request/response wrapper over aiohttp.

A Transport builds a request from TransportOptions (method, URI, headers,
cookies, body), sends it, captures the response (status, headers, cookies,
body), renders human-readable request/response logs and notifies
subscribers through four lifecycle events.

Key features:
- Text, bytes and stream request bodies
- Raw vs textual response body classification
- Pooled sessions per named client profile, or one-off sessions with
  timeout and client certificate
- Never raises from execute(): failures come back as a TransportResult
  and an on_fail notification
- Optional traffic logging to a file

Example:
    from transport_http import Transport, TransportOptions

    transport = Transport(
        TransportOptions(
            method="POST",
            uri="https://api.example.org/orders",
            headers=[("Content-Type", "application/json"), ("Accept", "application/json")],
        )
    )

    @transport.on_response.add_handler
    def show(event):
        print(event.response)

    result = await transport.execute('{"sku": "A-1"}')
    if result:
        print(transport.status_code, transport.response_body.value)
    else:
        print(result.error_kind, result.message)

Pooled Sessions:
    from transport_http import ClientFactory, ClientProfile

    factory = ClientFactory([ClientProfile(name="orders", base_url="https://api.example.org/", timeout=10)])
    async with factory:
        transport = Transport(TransportOptions(uri="orders/42", client_name="orders"), factory)
        await transport.execute()
"""

from .config import load_profiles
from .events import AsyncEvent
from .events import Event
from .events import EventType
from .events import FailEvent
from .events import RequestEvent
from .events import ResponseEvent
from .events import SuccessEvent
from .exceptions import ConfigurationError
from .exceptions import ErrorKind
from .exceptions import HTTPStatusError
from .exceptions import ResponseRejectedError
from .exceptions import TransportError
from .exceptions import UnsupportedBodyError
from .http import ClientFactory
from .http import FileTrafficLogger
from .http import TrafficLogger
from .transport import Transport
from .types import ClientCertificate
from .types import ClientProfile
from .types import ResponseBody
from .types import TransportOptions
from .types import TransportResult
from .types import TransportState

__all__ = [
    "AsyncEvent",
    "ClientCertificate",
    "ClientFactory",
    "ClientProfile",
    "ConfigurationError",
    "ErrorKind",
    "Event",
    "EventType",
    "FailEvent",
    "FileTrafficLogger",
    "HTTPStatusError",
    "RequestEvent",
    "ResponseBody",
    "ResponseEvent",
    "ResponseRejectedError",
    "SuccessEvent",
    "TrafficLogger",
    "Transport",
    "TransportError",
    "TransportOptions",
    "TransportResult",
    "TransportState",
    "UnsupportedBodyError",
    "load_profiles",
]
