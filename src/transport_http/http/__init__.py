"""HTTP submodule: sessions, request building, response capture and traffic logging."""

from .client import ClientFactory
from .client import create_session
from .logger import FileTrafficLogger
from .logger import TrafficLogger
from .request import PreparedRequest
from .request import build_request
from .request import render_request_log
from .request import resolve_url
from .response import extract_cookies
from .response import merge_headers
from .response import render_response_log

__all__ = [
    "ClientFactory",
    "FileTrafficLogger",
    "PreparedRequest",
    "TrafficLogger",
    "build_request",
    "create_session",
    "extract_cookies",
    "merge_headers",
    "render_request_log",
    "render_response_log",
    "resolve_url",
]
