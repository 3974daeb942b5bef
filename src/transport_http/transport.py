"""
Single-call HTTP transport: build, send, capture, log and notify.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http.cookies import BaseCookie
from pathlib import Path

import aiohttp

from .events import AsyncEvent
from .events import FailEvent
from .events import RequestEvent
from .events import ResponseEvent
from .events import SuccessEvent
from .exceptions import HTTPStatusError
from .exceptions import ResponseRejectedError
from .exceptions import classify_error
from .exceptions import full_message
from .http import ClientFactory
from .http import FileTrafficLogger
from .http import PreparedRequest
from .http import TrafficLogger
from .http import build_request
from .http import create_session
from .http import render_request_log
from .http import render_response_log
from .http import resolve_url
from .http.response import capture_cookies
from .http.response import capture_headers
from .http.response import is_success_status
from .http.response import read_body
from .http.response import status_name
from .types import Body
from .types import ResponseBody
from .types import TransportOptions
from .types import TransportResult
from .types import TransportState

logger = logging.getLogger(__name__)


class Transport:
    """
    Wraps one HTTP exchange.

    With a ClientFactory the transport borrows the pooled session of the
    profile named by ``options.client_name``. Without one it opens a
    dedicated session per call, applying ``options.timeout`` (default 60s)
    and ``options.certificate``.

    ``execute()`` never raises. It returns a TransportResult and fires, in
    order: ``on_request`` (once the request is built), ``on_response``, then
    exactly one of ``on_success`` / ``on_fail``. Captured state (status,
    logs, headers, cookies, body) is reset at the start of every call and
    describes the most recent one.

    Example:
        transport = Transport(TransportOptions(method="GET", uri="https://example.org/status"))

        @transport.on_fail.add_handler
        def report(event: FailEvent) -> None:
            print(f"{event.kind.value}: {event.message}")

        result = await transport.execute()
        if result:
            print(transport.response_body.value)
    """

    def __init__(
        self,
        options: TransportOptions,
        client_factory: ClientFactory | None = None,
        traffic_logger: TrafficLogger | None = None,
        log_file: Path | str | None = None,
        session_id: str | None = None,
    ):
        """
        Initialize the transport.

        Args:
            options: Request configuration
            client_factory: Optional factory providing pooled sessions
            traffic_logger: Optional sink for rendered request/response logs
            log_file: Shortcut for a FileTrafficLogger writing to this path.
                      Creates parent directories if they don't exist.
                      Mutually exclusive with traffic_logger.
            session_id: Tag attached to traffic log entries

        Raises:
            ValueError: If both traffic_logger and log_file are given
        """
        if traffic_logger is not None and log_file:
            raise ValueError("Pass either traffic_logger or log_file, not both")

        self.options = options
        self.client_factory = client_factory
        self.session_id = session_id

        self._traffic_logger = traffic_logger
        if log_file:
            log_path = Path(log_file) if isinstance(log_file, str) else log_file
            self._traffic_logger = FileTrafficLogger(log_path)
            logger.info(f"Traffic logging enabled: {log_path}")

        self.on_request: AsyncEvent[RequestEvent] = AsyncEvent("on_request")
        self.on_response: AsyncEvent[ResponseEvent] = AsyncEvent("on_response")
        self.on_success: AsyncEvent[SuccessEvent] = AsyncEvent("on_success")
        self.on_fail: AsyncEvent[FailEvent] = AsyncEvent("on_fail")

        self._reset()

    def _reset(self) -> None:
        self.state = TransportState.IDLE
        self.status_code: int | None = None
        self.request: str | None = None
        self.response: str | None = None
        self.response_body = ResponseBody()
        self.response_headers: dict[str, str] | None = None
        self.response_cookies: BaseCookie[str] | None = None
        self.result: TransportResult | None = None

    @property
    def is_pooled(self) -> bool:
        """True when sessions come from a ClientFactory."""
        return self.client_factory is not None

    def set_traffic_logger(self, traffic_logger: TrafficLogger | None) -> None:
        """Set or replace the traffic logger used by later calls."""
        self._traffic_logger = traffic_logger

    def prepare(self, body: Body | None = None) -> PreparedRequest:
        """
        Build the outgoing request without sending it.

        Raises:
            ConfigurationError: If the URI cannot be resolved or the profile is unknown
            UnsupportedBodyError: If the body shape is not supported
        """
        profile = self.client_factory.get_profile(self.options.client_name) if self.client_factory else None
        base_address = self.options.base_address or (profile.base_url if profile else None)
        url = resolve_url(self.options.uri, base_address)
        return build_request(
            method=self.options.method,
            url=url,
            headers=self.options.headers,
            cookies=self.options.cookies,
            body=body if body is not None else self.options.body,
            encoding=self.options.encoding,
            default_headers=profile.headers if profile else None,
        )

    @asynccontextmanager
    async def _open_session(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self.client_factory is not None:
            # Pooled sessions stay open; the factory owns them
            yield await self.client_factory.get_session(self.options.client_name)
            return

        session = create_session(timeout=self.options.timeout, certificate=self.options.certificate)
        try:
            yield session
        finally:
            await session.close()

    async def execute(self, body: Body | None = None) -> TransportResult:
        """
        Run one request/response exchange.

        Args:
            body: Request body; overrides ``options.body`` when given

        Returns:
            TransportResult, truthy on success. Failures of any kind (bad
            configuration, unsupported body, non-2xx status, connection,
            TLS or timeout errors) are reported through the result and the
            ``on_fail`` event, never raised.
        """
        self._reset()
        self.state = TransportState.BUILDING
        try:
            prepared = self.prepare(body)
            self.request = render_request_log(prepared)
            self._log_request(self.request)
            await self.on_request.emit(RequestEvent(request=self.request))

            async with self._open_session() as session:
                self.state = TransportState.SENT
                logger.debug(f"Sending {prepared.method} {prepared.url}")
                async with session.request(
                    prepared.method,
                    prepared.url,
                    headers=prepared.headers,
                    data=prepared.payload,
                ) as response:
                    await self._capture(response)

                    if not is_success_status(response.status):
                        raise HTTPStatusError(
                            response.status,
                            response.reason or status_name(response.status),
                            str(response.url),
                        )

                    if not await self.process_response(response):
                        raise ResponseRejectedError(f"Response from {response.url} was rejected")

            return await self._complete()
        except Exception as e:
            return await self._complete(e)

    async def _capture(self, response: aiohttp.ClientResponse) -> None:
        """Record status, headers, cookies and body, then render the response log."""
        self.status_code = response.status
        logger.debug(f"Received {response.status} from {response.url}")

        if is_success_status(response.status):
            self.response_headers = capture_headers(response)
            self.response_cookies = capture_cookies(response)
            self.response_body = await read_body(response, self.options.encoding)

        self.response = render_response_log(
            response.url,
            response.version,
            response.status,
            self.response_headers,
            self.response_body,
        )

    async def process_response(self, response: aiohttp.ClientResponse) -> bool:
        """
        Post-process a successful response.

        Called after capture for 2xx responses only; the body is already
        buffered in ``response_body``. Return False to fail the execution.
        Override in subclasses to validate payloads.
        """
        return True

    async def _complete(self, exc: Exception | None = None) -> TransportResult:
        """Fire the closing notifications and record the result."""
        if exc is None:
            self.state = TransportState.SUCCEEDED
            result = TransportResult(success=True, status_code=self.status_code)
            self._log_response(self.response)
            await self.on_response.emit(ResponseEvent(response=self.response, status_code=self.status_code))
            await self.on_success.emit(SuccessEvent(status_code=self.status_code))
        else:
            kind = classify_error(exc)
            message = full_message(exc)
            if self.response is None:
                self.response = message
            self.state = TransportState.FAILED
            result = TransportResult(
                success=False,
                status_code=self.status_code,
                error_kind=kind,
                message=message,
            )
            logger.warning(f"{self.options.method.upper()} {self.options.uri or self.options.base_address} failed: {message}")
            self._log_response(self.response)
            await self.on_response.emit(ResponseEvent(response=message, status_code=self.status_code))
            await self.on_fail.emit(FailEvent(message=message, kind=kind, status_code=self.status_code))

        self.result = result
        return result

    # traffic sink failures are logged and never leave execute()
    def _log_request(self, request: str) -> None:
        if not self._traffic_logger:
            return
        try:
            self._traffic_logger.log_request(request, self.session_id)
        except Exception:
            logger.exception("Failed to write request to traffic log")

    def _log_response(self, response: str | None) -> None:
        if not self._traffic_logger:
            return
        try:
            self._traffic_logger.log_response(response, self.status_code, self.session_id)
        except Exception:
            logger.exception("Failed to write response to traffic log")
