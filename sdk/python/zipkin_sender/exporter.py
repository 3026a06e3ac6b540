"""
Zipkin span exporter.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Set

import httpx

from zipkin_sender.config import SenderConfig
from zipkin_sender.errors import ErrorHandler, ZipkinSenderError
from zipkin_sender.headers import RawHeaderValue
from zipkin_sender.result import DoneCallback, ExportResult
from zipkin_sender.sender import SendFn, prepare_send
from zipkin_sender.transport.beacon import Beacon

logger = logging.getLogger("zipkin_sender")

HeadersFactory = Callable[[], Mapping[str, RawHeaderValue]]


class ZipkinExporter:
    """
    Exports batches of serialized spans to a Zipkin collector.

    Example:
        exporter = ZipkinExporter(url="http://localhost:9411/api/v2/spans")

        await exporter.export(spans, lambda result: print(result.code))

        # Wait for in-flight batches and refuse new ones
        await exporter.shutdown()
    """

    def __init__(
        self,
        url: Optional[str] = None,
        headers: Optional[Mapping[str, RawHeaderValue]] = None,
        get_export_request_headers: Optional[HeadersFactory] = None,
        beacon: Optional[Beacon] = None,
        timeout: Optional[float] = None,
        error_handler: Optional[ErrorHandler] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the exporter.

        Args:
            url: Collector endpoint; defaults to OTEL_EXPORTER_ZIPKIN_ENDPOINT
            headers: Extra request headers
            get_export_request_headers: Called before every export; its headers
                are merged over ``headers`` and the sender is rebuilt
            beacon: Best-effort send primitive
            timeout: Request timeout in seconds; defaults to
                OTEL_EXPORTER_ZIPKIN_TIMEOUT
            error_handler: Receives connection-level errors
            http_transport: Optional httpx transport for the request path
        """
        self.config = SenderConfig.from_env(
            url=url,
            headers=dict(headers) if headers is not None else None,
            timeout_ms=int(timeout * 1000) if timeout is not None else None,
        )
        self._get_export_request_headers = get_export_request_headers
        self._beacon = beacon
        self._error_handler = error_handler
        self._http_transport = http_transport

        self._send: Optional[SendFn] = None
        self._pending: Set["asyncio.Future[None]"] = set()
        self._is_shutdown = False

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def pending_count(self) -> int:
        """Number of exports still in flight."""
        return len(self._pending)

    async def export(self, spans: Sequence[Any], result_callback: DoneCallback) -> None:
        """
        Export a batch of spans.

        Args:
            spans: Serialized span records
            result_callback: Called exactly once with the result
        """
        if self._is_shutdown:
            result_callback(ExportResult.failed(ZipkinSenderError("Exporter has been shutdown")))
            return

        task = asyncio.ensure_future(self._export(spans, result_callback))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        await task

    async def force_flush(self) -> None:
        """Wait for every in-flight export."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def shutdown(self) -> None:
        """Refuse further exports and wait for in-flight ones."""
        if self._is_shutdown:
            logger.debug("shutdown already started")
            return
        self._is_shutdown = True
        await self.force_flush()

    async def _export(self, spans: Sequence[Any], result_callback: DoneCallback) -> None:
        try:
            send = await self._get_send()
        except Exception as e:
            logger.error(f"Failed to prepare zipkin sender: {e}")
            result_callback(ExportResult.failed(e))
            return
        await send(spans, result_callback)

    async def _get_send(self) -> SendFn:
        if self._get_export_request_headers is not None:
            return await self._prepare(self._export_headers())
        if self._send is None:
            self._send = await self._prepare(self.config.headers)
        return self._send

    def _export_headers(self) -> Dict[str, RawHeaderValue]:
        headers: Dict[str, RawHeaderValue] = dict(self.config.headers or {})
        headers.update(self._get_export_request_headers())
        return headers

    async def _prepare(self, headers: Optional[Mapping[str, RawHeaderValue]]) -> SendFn:
        return await prepare_send(
            self.config.url,
            headers,
            beacon=self._beacon,
            timeout=self.config.timeout_seconds,
            error_handler=self._error_handler,
            http_transport=self._http_transport,
        )
