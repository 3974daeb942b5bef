"""
Outgoing request construction: URL resolution, headers, cookies and body payloads.
"""

import base64
import io
import logging
from collections.abc import AsyncIterable
from collections.abc import Mapping
from dataclasses import dataclass
from http.cookies import BaseCookie

import aiohttp
from multidict import CIMultiDict
from yarl import URL

from ..exceptions import ConfigurationError
from ..exceptions import UnsupportedBodyError
from ..types import Body
from ..types import Cookies
from ..types import Headers
from ..types import split_content_type

logger = logging.getLogger(__name__)

COOKIE = "Cookie"


@dataclass
class PreparedRequest:
    """A request ready to be handed to an aiohttp session."""

    method: str
    url: URL
    headers: CIMultiDict[str]
    payload: aiohttp.Payload | None = None
    body: Body | None = None  # Original body, kept for the request log


def resolve_url(uri: str | None, base_address: str | None = None) -> URL:
    """
    Resolve the request target.

    Args:
        uri: Absolute URI, or a URI relative to ``base_address``
        base_address: Optional absolute base address

    Returns:
        The absolute request URL

    Raises:
        ConfigurationError: If no target is configured, or the URIs do not
            combine into an absolute URL
    """
    if not uri and not base_address:
        raise ConfigurationError("Request URI is not set: configure an absolute uri or a base_address")

    try:
        if not base_address:
            url = URL(uri)
            if not url.is_absolute():
                raise ConfigurationError(f"Request URI must be absolute when no base address is set: {uri}")
            return url

        base = URL(base_address)
        if not base.is_absolute():
            raise ConfigurationError(f"Base address must be absolute: {base_address}")
        if not uri:
            return base

        relative = URL(uri)
        if relative.is_absolute():
            raise ConfigurationError(f"Request URI must be relative when a base address is set: {uri}")
        return base.join(relative)
    except ValueError as e:
        raise ConfigurationError(f"Malformed request URI: {e}") from e


def cookie_header(cookies: Cookies | None) -> str | None:
    """Serialize cookies as ``name=value`` pairs joined with ``"; "``."""
    if not cookies:
        return None
    if isinstance(cookies, BaseCookie):
        pairs = [f"{name}={morsel.value}" for name, morsel in cookies.items()]
    else:
        pairs = [f"{name}={value}" for name, value in cookies.items()]
    return "; ".join(pairs)


def create_payload(body: Body | None, encoding: str, content_type: str) -> aiohttp.Payload | None:
    """
    Pick the payload encoder matching the body's runtime shape.

    - str: text payload, ``content_type`` with the charset appended
    - bytes-like: raw payload with ``content_type``
    - IO stream or async iterable of bytes: streamed payload with ``content_type``

    Raises:
        UnsupportedBodyError: For any other body type
    """
    if body is None:
        return None
    if isinstance(body, str):
        return aiohttp.StringPayload(body, encoding=encoding, content_type=f"{content_type}; charset={encoding}")
    if isinstance(body, bytes | bytearray | memoryview):
        return aiohttp.BytesPayload(body, content_type=content_type)
    if isinstance(body, io.IOBase):
        return aiohttp.get_payload(body, content_type=content_type)
    if isinstance(body, AsyncIterable):
        return aiohttp.AsyncIterablePayload(body, content_type=content_type)
    raise UnsupportedBodyError(type(body).__name__)


def build_request(
    method: str,
    url: URL,
    headers: Headers | None = None,
    cookies: Cookies | None = None,
    body: Body | None = None,
    encoding: str = "utf-8",
    default_headers: Mapping[str, str] | None = None,
) -> PreparedRequest:
    """
    Assemble a request.

    The Cookie header comes first, then profile defaults not overridden by
    the configured headers, then the configured headers in order. The
    configured Content-Type is moved onto the body payload.
    """
    remaining, content_type = split_content_type(headers)

    request_headers: CIMultiDict[str] = CIMultiDict()
    cookie_value = cookie_header(cookies)
    if cookie_value:
        request_headers.add(COOKIE, cookie_value)

    configured = {name.lower() for name, _ in remaining}
    for name, value in (default_headers or {}).items():
        if name.lower() not in configured:
            request_headers.add(name, value)
    for name, value in remaining:
        request_headers.add(name, value)

    payload = create_payload(body, encoding, content_type)
    logger.debug(f"Built {method.upper()} {url} ({type(body).__name__ if body is not None else 'no'} body)")

    return PreparedRequest(
        method=method.upper(),
        url=url,
        headers=request_headers,
        payload=payload,
        body=body,
    )


def render_request_log(request: PreparedRequest) -> str:
    """
    Render a human-readable request log.

    Format::

        METHOD url
        Name: value
        <blank line>
        body (base64 for raw bytes)
    """
    lines = [f"{request.method} {request.url}\r\n"]
    for name in _unique_keys(request.headers):
        lines.append(f"{name}: {', '.join(request.headers.getall(name))}\r\n")
    lines.append("\r\n")

    body = request.body
    if body is not None:
        if isinstance(body, bytes | bytearray | memoryview):
            lines.append(base64.b64encode(bytes(body)).decode("ascii") + "\r\n")
        elif isinstance(body, str):
            lines.append(body + "\r\n")
        else:
            lines.append(f"<{type(body).__name__} stream>\r\n")
    return "".join(lines)


def _unique_keys(headers: CIMultiDict[str]) -> list[str]:
    seen: set[str] = set()
    keys: list[str] = []
    for name in headers.keys():
        if name.lower() not in seen:
            seen.add(name.lower())
            keys.append(name)
    return keys
