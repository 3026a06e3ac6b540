"""
Configuration for the Zipkin sender.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger("zipkin_sender")

DEFAULT_ENDPOINT = "http://localhost:9411/api/v2/spans"
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_TIMEOUT = DEFAULT_TIMEOUT_MS / 1000.0

ENDPOINT_ENV = "OTEL_EXPORTER_ZIPKIN_ENDPOINT"
TIMEOUT_ENV = "OTEL_EXPORTER_ZIPKIN_TIMEOUT"


@dataclass
class SenderConfig:
    """Settings used to build a sender."""
    url: str = DEFAULT_ENDPOINT
    headers: Optional[Dict[str, Any]] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_env(cls, **overrides: Any) -> "SenderConfig":
        """
        Build a config from the environment.

        Args:
            **overrides: Explicit values; these win over the environment.

        Returns:
            SenderConfig
        """
        values: Dict[str, Any] = {
            "url": os.environ.get(ENDPOINT_ENV) or DEFAULT_ENDPOINT,
            "timeout_ms": _timeout_from_env(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if not values["url"]:
            raise ValueError("zipkin endpoint url must not be empty")
        return cls(**values)


def _timeout_from_env() -> int:
    raw = os.environ.get(TIMEOUT_ENV)
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        timeout = int(raw)
    except ValueError:
        logger.warning(f"Invalid {TIMEOUT_ENV}={raw!r}, using {DEFAULT_TIMEOUT_MS}ms")
        return DEFAULT_TIMEOUT_MS
    if timeout <= 0:
        logger.warning(f"Invalid {TIMEOUT_ENV}={raw!r}, using {DEFAULT_TIMEOUT_MS}ms")
        return DEFAULT_TIMEOUT_MS
    return timeout
