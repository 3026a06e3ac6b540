"""
Errors and the error handler used for unrecoverable transport faults.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger("zipkin_sender")

ErrorHandler = Callable[[BaseException], None]


class ZipkinSenderError(Exception):
    """Base class for errors raised by zipkin_sender."""


class BeaconRejectedError(ZipkinSenderError):
    """The beacon primitive refused to queue a payload."""

    def __init__(self, payload: str):
        super().__init__(f"sendBeacon - cannot send {payload}")
        self.payload = payload


class UnexpectedStatusError(ZipkinSenderError):
    """The collector answered with a status outside [200, 400)."""

    def __init__(self, status_code: int):
        super().__init__(f"Got unexpected status code from zipkin: {status_code}")
        self.status_code = status_code


class ZipkinRequestError(ZipkinSenderError):
    """The request failed before a response was received."""


def logging_error_handler(error: BaseException) -> None:
    """Default handler: record the error on the package logger."""
    logger.error(f"Unhandled zipkin_sender error: {error}")


# Shared by every thread and event loop in the process
_error_handler: Optional[ErrorHandler] = None
_error_handler_lock = threading.Lock()


def set_global_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Set the process-wide error handler. ``None`` restores the default."""
    global _error_handler
    with _error_handler_lock:
        _error_handler = handler


def get_global_error_handler() -> ErrorHandler:
    """Get the process-wide error handler."""
    with _error_handler_lock:
        return _error_handler or logging_error_handler


def global_error_handler(error: BaseException) -> None:
    """
    Report an error to the process-wide handler.

    A handler that raises is logged and otherwise ignored, so reporting never
    interrupts the caller.
    """
    report_error(get_global_error_handler(), error)


def report_error(handler: ErrorHandler, error: BaseException) -> None:
    """Call ``handler`` with ``error``, logging anything the handler raises."""
    try:
        handler(error)
    except Exception as e:
        logger.error(f"Error handler failed while reporting {error!r}: {e}")
