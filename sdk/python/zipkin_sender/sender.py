"""
Factory for Zipkin send functions.

The transport is chosen once, when the send function is prepared:

    send = await prepare_send("http://localhost:9411/api/v2/spans")
    await send(spans, lambda result: print(result.code))

A beacon is used when one is available and no headers were given, because a
beacon cannot carry custom headers. Otherwise each batch is POSTed with the
default JSON headers merged with the given ones.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from typing import Any, List, Mapping, Optional, Sequence

import httpx

from zipkin_sender.config import DEFAULT_TIMEOUT
from zipkin_sender.context import get_beacon
from zipkin_sender.errors import ErrorHandler
from zipkin_sender.headers import HeaderMap, RawHeaderValue, build_request_headers
from zipkin_sender.result import DoneCallback, ExportResult
from zipkin_sender.transport.base import TransportKind, TransportStrategy
from zipkin_sender.transport.beacon import Beacon, BeaconTransport
from zipkin_sender.transport.http import HttpRequestTransport

logger = logging.getLogger("zipkin_sender")


def serialize_spans(spans: Sequence[Any]) -> str:
    """
    Serialize a batch of span records as one JSON array.

    Records may be mappings, dataclasses, or objects with ``to_dict()``.
    """
    records: List[Any] = []
    for span in spans:
        if hasattr(span, "to_dict"):
            records.append(span.to_dict())
        elif is_dataclass(span) and not isinstance(span, type):
            records.append(asdict(span))
        else:
            records.append(span)
    return json.dumps(records)


class SendFn:
    """
    Sends batches of spans to one collector through one transport.

    Instances hold no per-call state and can be awaited concurrently.
    """

    def __init__(self, strategy: TransportStrategy):
        self._strategy = strategy

    @property
    def kind(self) -> TransportKind:
        return self._strategy.kind

    @property
    def url(self) -> str:
        return self._strategy.url

    async def __call__(self, spans: Sequence[Any], done: DoneCallback) -> None:
        """
        Send a batch of spans.

        Args:
            spans: Serialized span records
            done: Called exactly once with the delivery result
        """
        if len(spans) == 0:
            logger.debug("Zipkin send with empty spans")
            done(ExportResult.success())
            return

        try:
            payload = serialize_spans(spans)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize zipkin spans: {e}")
            done(ExportResult.failed(e))
            return

        await self._strategy.deliver(payload, done)

    def __repr__(self) -> str:
        return f"SendFn(kind={self.kind.value!r}, url={self.url!r})"


async def prepare_send(
    url: str,
    headers: Optional[Mapping[str, RawHeaderValue]] = None,
    *,
    beacon: Optional[Beacon] = None,
    timeout: Optional[float] = None,
    error_handler: Optional[ErrorHandler] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SendFn:
    """
    Prepare a function that sends spans to a Zipkin collector.

    Args:
        url: Collector endpoint
        headers: Extra request headers; values may be strings or zero-argument
            callables, sync or async. Passing any mapping, even an empty one,
            disables the beacon.
        beacon: Best-effort send primitive; defaults to the one registered
            with ``set_beacon``
        timeout: Request timeout in seconds
        error_handler: Receives connection-level errors; defaults to the
            process-wide handler
        http_transport: Optional httpx transport for the request path

    Returns:
        SendFn bound to the chosen transport

    Raises:
        ValueError: If ``url`` is empty
    """
    if not url:
        raise ValueError("zipkin url must not be empty")

    beacon = beacon if beacon is not None else get_beacon()

    strategy: TransportStrategy
    if beacon is not None and headers is None:
        strategy = BeaconTransport(url, beacon)
    else:
        request_headers: HeaderMap = build_request_headers(headers)
        strategy = HttpRequestTransport(
            url,
            request_headers,
            timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
            error_handler=error_handler,
            http_transport=http_transport,
        )

    logger.debug(f"Prepared zipkin sender using {strategy.kind.value} transport for {url}")
    return SendFn(strategy)
