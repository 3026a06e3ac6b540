"""
Request/response delivery over HTTP.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from zipkin_sender.config import DEFAULT_TIMEOUT
from zipkin_sender.errors import (
    ErrorHandler,
    UnexpectedStatusError,
    ZipkinRequestError,
    global_error_handler,
    report_error,
)
from zipkin_sender.headers import HeaderMap, resolve_headers
from zipkin_sender.result import DoneCallback, ExportResult
from zipkin_sender.transport.base import TransportKind, TransportStrategy

logger = logging.getLogger("zipkin_sender")


class HttpRequestTransport(TransportStrategy):
    """
    POSTs each payload to the collector and maps the response status.

    Every delivery opens its own client. Header values are resolved per
    delivery, so computed headers may change between batches.
    """

    kind = TransportKind.REQUEST
    method = "POST"

    def __init__(
        self,
        url: str,
        header_map: Optional[HeaderMap] = None,
        timeout: float = DEFAULT_TIMEOUT,
        error_handler: Optional[ErrorHandler] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP transport.

        Args:
            url: Collector endpoint
            header_map: Headers attached to every request
            timeout: Request timeout in seconds
            error_handler: Receives connection-level errors; defaults to the
                process-wide handler
            http_transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        super().__init__(url)
        self.header_map: HeaderMap = dict(header_map or {})
        self.timeout = timeout
        self._error_handler = error_handler
        self._http_transport = http_transport

    async def deliver(self, payload: str, done: DoneCallback) -> None:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._http_transport,
        ) as client:
            try:
                request = client.build_request(
                    self.method, self.url, content=payload.encode("utf-8")
                )
            except httpx.InvalidURL as e:
                self._on_error(e, done)
                return

            # All headers must be settled before the request goes out
            self._set_headers(request, await resolve_headers(self.header_map))

            logger.debug(f"Zipkin request payload: {payload}")
            try:
                response = await client.send(request)
            except httpx.RequestError as e:
                self._on_error(e, done)
                return

        self._on_complete(response.status_code or 0, payload, done)

    def _set_headers(self, request: httpx.Request, headers: Dict[str, str]) -> None:
        for name, value in headers.items():
            try:
                name.encode("ascii")
                value.encode("ascii")
            except UnicodeEncodeError as e:
                logger.error(f"Failed Header [{name}] could not be encoded: {e}")
                continue
            request.headers[name] = value

    def _on_complete(self, status_code: int, payload: str, done: DoneCallback) -> None:
        logger.debug(f"Zipkin response status code: {status_code}, body: {payload}")

        if 200 <= status_code < 400:
            done(ExportResult.success())
        else:
            done(ExportResult.failed(UnexpectedStatusError(status_code)))

    def _on_error(self, error: Exception, done: DoneCallback) -> None:
        fault = ZipkinRequestError(f"Zipkin request error: {error}")
        fault.__cause__ = error
        if self._error_handler is None:
            global_error_handler(fault)
        else:
            report_error(self._error_handler, fault)
        done(ExportResult.failed())
