"""
Response capture: headers, cookies, body classification and the response log.
"""

import base64
import logging
from collections.abc import Mapping
from http import HTTPStatus
from http.cookies import BaseCookie
from http.cookies import CookieError
from http.cookies import SimpleCookie

import aiohttp
from multidict import CIMultiDictProxy
from multidict import MultiMapping
from yarl import URL

from ..types import CONTENT_TYPE
from ..types import RAW_MEDIA_TYPES
from ..types import ResponseBody

logger = logging.getLogger(__name__)

SET_COOKIE = "Set-Cookie"


def is_success_status(status: int) -> bool:
    """2xx only; redirects and informational codes do not count."""
    return 200 <= status <= 299


def status_name(status: int) -> str:
    """
    Compact status name: the reason phrase with spaces and punctuation removed.

    200 -> "OK", 404 -> "NotFound", 500 -> "InternalServerError".
    Unknown codes render as the number itself.
    """
    try:
        return "".join(ch for ch in HTTPStatus(status).phrase if ch.isalnum())
    except ValueError:
        return str(status)


def merge_headers(*collections: MultiMapping | Mapping[str, str]) -> dict[str, str]:
    """
    Flatten header collections into a plain dict.

    Within one collection all values of a key are joined with ``", "``.
    Across collections the first collection to define a key wins; keys are
    compared case-sensitively, as received.
    """
    result: dict[str, str] = {}
    for headers in collections:
        grouped: set[str] = set()
        for name in headers.keys():
            if name in result or name.lower() in grouped:
                continue
            grouped.add(name.lower())
            if isinstance(headers, MultiMapping):
                values = headers.getall(name, [])
            else:
                values = [headers[name]]
            result[name] = ", ".join(values)
    return result


def extract_cookies(set_cookie_headers: list[str], response_url: URL) -> BaseCookie[str]:
    """
    Replay Set-Cookie headers into a cookie jar scoped to the response URL.

    The jar applies aiohttp's domain, path and expiry rules; only cookies
    that would be sent back to ``response_url`` are returned. Malformed
    headers are skipped.
    """
    if not set_cookie_headers:
        return SimpleCookie()

    jar = aiohttp.CookieJar(unsafe=True)
    for header in set_cookie_headers:
        cookie: SimpleCookie = SimpleCookie()
        try:
            cookie.load(header)
        except CookieError:
            logger.debug(f"Skipping malformed Set-Cookie header: {header!r}")
            continue
        jar.update_cookies(cookie, response_url)

    return jar.filter_cookies(response_url)


def classify_body(data: bytes, content_type: str | None, encoding: str) -> ResponseBody:
    """
    Decide between the raw and textual body representation.

    Raw when the media type is one of RAW_MEDIA_TYPES or no Content-Type was
    sent at all; otherwise text decoded with ``encoding``.
    """
    media_type = content_type.split(";", 1)[0].strip().lower() if content_type else None
    if media_type is None or media_type in RAW_MEDIA_TYPES:
        return ResponseBody.raw(data)
    return ResponseBody.text(data.decode(encoding, errors="replace"))


async def read_body(response: aiohttp.ClientResponse, encoding: str) -> ResponseBody:
    """Buffer the whole response body and classify it."""
    data = await response.read()
    return classify_body(data, response.headers.get(CONTENT_TYPE), encoding)


def capture_headers(response: aiohttp.ClientResponse) -> dict[str, str]:
    return merge_headers(response.headers)


def capture_cookies(response: aiohttp.ClientResponse) -> BaseCookie[str]:
    headers: CIMultiDictProxy[str] = response.headers
    return extract_cookies(headers.getall(SET_COOKIE, []), response.url)


def render_response_log(
    url: URL,
    version: tuple[int, int] | None,
    status: int,
    headers: Mapping[str, str] | None,
    body: ResponseBody,
) -> str:
    """
    Render a human-readable response log.

    Format::

        SCHEME major.minor status StatusName
        Name: value
        <blank line>
        body (base64 when raw)

    The header and body sections are only present when captured.
    """
    major, minor = version or (1, 1)
    lines = [f"{url.scheme.upper()} {major}.{minor} {status} {status_name(status)}\r\n"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}\r\n")

    if body.is_assigned:
        lines.append("\r\n")
        if body.is_raw:
            lines.append(base64.b64encode(body.raw_value or b"").decode("ascii") + "\r\n")
        else:
            lines.append((body.value or "") + "\r\n")
    return "".join(lines)
