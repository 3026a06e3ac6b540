"""
Best-effort delivery.

A beacon is a fire-and-forget primitive: it either accepts a payload for
background delivery or rejects it immediately. Whether the payload reaches
the collector is never observed.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional, Tuple

import httpx

from zipkin_sender.config import DEFAULT_TIMEOUT
from zipkin_sender.errors import BeaconRejectedError
from zipkin_sender.result import DoneCallback, ExportResult
from zipkin_sender.transport.base import TransportKind, TransportStrategy

logger = logging.getLogger("zipkin_sender")

Beacon = Callable[[str, str], bool]

DEFAULT_MAX_PAYLOAD_BYTES = 64 * 1024


class BeaconQueue:
    """
    A beacon primitive backed by a bounded queue and a daemon thread.

    Calling the queue with ``(url, data)`` returns True when the payload was
    queued and False when it is too large, the queue is full, or the queue
    has been stopped. Queued payloads are POSTed in the background; failures
    are logged and dropped.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
        max_queue_size: int = 100,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the beacon queue.

        Args:
            timeout: Request timeout in seconds
            max_payload_bytes: Largest payload accepted, in UTF-8 bytes
            max_queue_size: Maximum number of pending payloads
            transport: Optional httpx transport used for delivery
        """
        self._max_payload_bytes = max_payload_bytes
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport)
        self._queue: queue.Queue[Tuple[str, str]] = queue.Queue(maxsize=max_queue_size)

        self._running = True
        self._drain_thread = threading.Thread(target=self._drain_loop, daemon=True)
        self._drain_thread.start()

    def __call__(self, url: str, data: str) -> bool:
        if not self._running:
            return False

        size = len(data.encode("utf-8"))
        if size > self._max_payload_bytes:
            logger.debug(f"Beacon payload of {size} bytes exceeds {self._max_payload_bytes}")
            return False

        try:
            self._queue.put_nowait((url, data))
            return True
        except queue.Full:
            logger.warning("Beacon queue is full, rejecting payload")
            return False

    @property
    def pending_count(self) -> int:
        """Number of payloads waiting to be sent."""
        return self._queue.qsize()

    def flush(self) -> None:
        """Send all queued payloads on the calling thread."""
        while True:
            try:
                url, data = self._queue.get_nowait()
            except queue.Empty:
                break
            self._post(url, data)

    def stop(self) -> None:
        """Stop accepting payloads, deliver what is queued, and close the client."""
        self._running = False
        if self._drain_thread.is_alive():
            self._drain_thread.join(timeout=5.0)
        self.flush()
        self._client.close()

    def _drain_loop(self) -> None:
        """Background thread delivering queued payloads."""
        while self._running:
            try:
                url, data = self._queue.get(timeout=0.1)
            except queue.Empty:
                continue
            self._post(url, data)

    def _post(self, url: str, data: str) -> None:
        try:
            response = self._client.post(
                url,
                content=data.encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
            if not 200 <= response.status_code < 400:
                logger.warning(f"Beacon delivery got status {response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Beacon delivery failed: {e}")


class BeaconTransport(TransportStrategy):
    """Sends each payload through a beacon primitive."""

    kind = TransportKind.BEACON

    def __init__(self, url: str, beacon: Beacon):
        super().__init__(url)
        self._beacon = beacon

    async def deliver(self, payload: str, done: DoneCallback) -> None:
        try:
            accepted = self._beacon(self.url, payload)
        except Exception as e:
            logger.error(f"sendBeacon raised: {e}")
            done(ExportResult.failed(e))
            return

        if accepted:
            logger.debug(f"sendBeacon - can send {payload}")
            done(ExportResult.success())
        else:
            done(ExportResult.failed(BeaconRejectedError(payload)))
