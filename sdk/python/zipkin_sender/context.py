"""
Runtime capabilities available to senders.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from zipkin_sender.transport.beacon import Beacon

# The best-effort send primitive exposed by the runtime, shared process-wide
_beacon: Optional["Beacon"] = None
_beacon_lock = threading.Lock()


def set_beacon(beacon: Optional["Beacon"]) -> None:
    """Register the runtime's best-effort send primitive."""
    global _beacon
    with _beacon_lock:
        _beacon = beacon


def get_beacon() -> Optional["Beacon"]:
    """Get the registered best-effort send primitive."""
    with _beacon_lock:
        return _beacon


class BeaconContext:
    """
    Context manager for temporarily registering a beacon primitive.

    The previous beacon is restored on exit.

    Example:
        with BeaconContext(queue):
            send = await prepare_send(url)  # uses the beacon
    """

    def __init__(self, beacon: Optional["Beacon"]):
        self.beacon = beacon
        self._previous: Optional["Beacon"] = None

    def __enter__(self) -> Optional["Beacon"]:
        self._previous = get_beacon()
        set_beacon(self.beacon)
        return self.beacon

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        set_beacon(self._previous)
