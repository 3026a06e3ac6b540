"""
Delivery results reported by the Zipkin senders.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class ExportResultCode(Enum):
    """Outcome of a single delivery attempt."""
    SUCCESS = 0
    FAILED = 1


@dataclass(frozen=True)
class ExportResult:
    """
    Result of sending one batch of spans.

    A failed result may carry the underlying error. Transport faults that were
    already reported to the error handler are returned without one.
    """
    code: ExportResultCode
    error: Optional[BaseException] = None

    @classmethod
    def success(cls) -> "ExportResult":
        return cls(ExportResultCode.SUCCESS)

    @classmethod
    def failed(cls, error: Optional[BaseException] = None) -> "ExportResult":
        return cls(ExportResultCode.FAILED, error)

    @property
    def ok(self) -> bool:
        return self.code is ExportResultCode.SUCCESS


DoneCallback = Callable[[ExportResult], None]
