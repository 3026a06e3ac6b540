"""
Transport strategy interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from zipkin_sender.result import DoneCallback


class TransportKind(Enum):
    """Delivery mechanism chosen when a sender is built."""
    BEACON = "beacon"
    REQUEST = "request"


class TransportStrategy(ABC):
    """Delivers one serialized payload and reports the outcome to ``done``."""

    kind: TransportKind

    def __init__(self, url: str):
        self.url = url

    @abstractmethod
    async def deliver(self, payload: str, done: DoneCallback) -> None:
        """
        Deliver ``payload``.

        ``done`` must be called exactly once and nothing may be raised.
        """
