"""
Core types for transport_http.
"""

import codecs
import io
import ssl
from collections.abc import AsyncIterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from http.cookies import BaseCookie
from typing import Any

from .exceptions import ErrorKind

# =============================================================================
# Type aliases
# =============================================================================

# Ordered header pairs; a mapping is accepted wherever a header list is
HeaderList = Sequence[tuple[str, str]]
Headers = HeaderList | Mapping[str, str]

# Request cookies, serialized into a single Cookie header
Cookies = Mapping[str, str] | BaseCookie[str]

# Request body union: text, raw bytes, or a stream
Body = str | bytes | bytearray | memoryview | io.IOBase | AsyncIterable[bytes]

CONTENT_TYPE = "Content-Type"
DEFAULT_CONTENT_TYPE = "application/json"
DEFAULT_ENCODING = "utf-8"
DEFAULT_TIMEOUT = 60.0

# Response media types captured as raw bytes
RAW_MEDIA_TYPES = frozenset(
    {
        "application/octet-stream",
        "application/pdf",
        "application/rtf",
        "application/zip",
    }
)


def normalize_headers(headers: Headers | None) -> list[tuple[str, str]]:
    """Return headers as a fresh list of (name, value) pairs."""
    if headers is None:
        return []
    if isinstance(headers, Mapping):
        return list(headers.items())
    return [(name, value) for name, value in headers]


def split_content_type(headers: Headers | None) -> tuple[list[tuple[str, str]], str]:
    """
    Separate the Content-Type header from the rest.

    Args:
        headers: Configured request headers

    Returns:
        The remaining headers and the content type to apply to the body
        (``application/json`` when none is configured)
    """
    remaining: list[tuple[str, str]] = []
    content_type: str | None = None
    for name, value in normalize_headers(headers):
        if name.lower() == CONTENT_TYPE.lower():
            if content_type is None:
                content_type = value
            continue
        remaining.append((name, value))
    return remaining, content_type or DEFAULT_CONTENT_TYPE


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class ClientCertificate:
    """
    Client certificate presented during the TLS handshake.

    Attributes:
        cert_file: PEM file holding the certificate (and optionally the key)
        key_file: Separate PEM key file
        password: Password protecting the private key
        ca_file: CA bundle used to validate the server certificate
        verify: Validate the server certificate; False accepts any certificate
    """

    cert_file: str
    key_file: str | None = None
    password: str | None = None
    ca_file: str | None = None
    verify: bool = True

    def create_ssl_context(self) -> ssl.SSLContext:
        """Build an SSL context presenting this certificate."""
        context = ssl.create_default_context(cafile=self.ca_file)
        context.load_cert_chain(self.cert_file, keyfile=self.key_file, password=self.password)
        if not self.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClientCertificate":
        return cls(**data)


@dataclass
class ClientProfile:
    """Named configuration for a pooled client session."""

    name: str = ""
    base_url: str | None = None
    timeout: float | None = None
    headers: dict[str, str] = field(default_factory=dict)
    limit: int = 100  # Max simultaneous connections
    certificate: ClientCertificate | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"Profile '{self.name}': timeout must be positive, got {self.timeout}")
        if self.limit < 0:
            raise ValueError(f"Profile '{self.name}': limit must not be negative, got {self.limit}")


@dataclass
class TransportOptions:
    """
    Configuration for a single transport.

    Either ``uri`` must be absolute, or ``base_address`` must be set and
    ``uri`` (if any) relative to it.
    """

    method: str = "GET"
    uri: str | None = None
    base_address: str | None = None
    headers: Headers | None = None
    cookies: Cookies | None = None
    body: Body | None = None
    client_name: str | None = None  # Profile used when a ClientFactory is injected
    timeout: float | None = None  # Seconds; ad-hoc sessions only
    certificate: ClientCertificate | None = None  # Ad-hoc sessions only
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        if not self.method or not self.method.strip():
            raise ValueError("HTTP method must not be empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {self.encoding}") from e

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TransportOptions":
        """Build options from a plain mapping (e.g. parsed JSON or YAML)."""
        values = dict(data)
        certificate = values.get("certificate")
        if isinstance(certificate, Mapping):
            values["certificate"] = ClientCertificate.from_mapping(certificate)
        headers = values.get("headers")
        if isinstance(headers, list):
            values["headers"] = [(str(name), str(value)) for name, value in headers]
        return cls(**values)


# =============================================================================
# Results
# =============================================================================


class TransportState(Enum):
    """Lifecycle of a transport execution."""

    IDLE = "idle"
    BUILDING = "building"
    SENT = "sent"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ResponseBody:
    """
    Captured response body.

    Exactly one of ``value`` / ``raw_value`` is set once ``is_assigned``
    is True; ``is_raw`` tells which.
    """

    value: str | None = None
    raw_value: bytes | None = None
    is_raw: bool = False
    is_assigned: bool = False

    @classmethod
    def text(cls, value: str) -> "ResponseBody":
        return cls(value=value, is_assigned=True)

    @classmethod
    def raw(cls, raw_value: bytes) -> "ResponseBody":
        return cls(raw_value=raw_value, is_raw=True, is_assigned=True)

    def as_tuple(self) -> tuple[str | None, bytes | None, bool, bool]:
        return (self.value, self.raw_value, self.is_raw, self.is_assigned)


@dataclass(frozen=True)
class TransportResult:
    """Outcome of Transport.execute(); truthy on success."""

    success: bool
    status_code: int | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    def __bool__(self) -> bool:
        return self.success
