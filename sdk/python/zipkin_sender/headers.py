"""
Request header values and their resolution.

A header value is either a literal string or a zero-argument computation.
Computations may return a plain value or an awaitable; both are stringified.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union

logger = logging.getLogger("zipkin_sender")

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass(frozen=True)
class LiteralHeader:
    """A header set verbatim."""
    value: str


@dataclass(frozen=True)
class ComputedHeader:
    """A header evaluated each time a request is sent."""
    compute: Callable[[], Union[Any, Awaitable[Any]]]


HeaderValue = Union[LiteralHeader, ComputedHeader]
RawHeaderValue = Union[str, Callable[[], Any], HeaderValue, None]
HeaderMap = Dict[str, HeaderValue]


def header_value(raw: RawHeaderValue) -> HeaderValue:
    """
    Coerce a raw header value into a HeaderValue.

    Empty values (``None``, ``""``) become an empty literal. Anything else
    that is not callable is stringified.
    """
    if isinstance(raw, (LiteralHeader, ComputedHeader)):
        return raw
    if not raw:
        return LiteralHeader("")
    if isinstance(raw, str):
        return LiteralHeader(raw)
    if callable(raw):
        return ComputedHeader(raw)
    return LiteralHeader(str(raw))


def build_request_headers(
    overrides: Optional[Mapping[str, RawHeaderValue]] = None,
) -> HeaderMap:
    """
    Merge the default JSON headers with caller overrides.

    Keys match case-sensitively and overrides win on collision.
    """
    merged: Dict[str, RawHeaderValue] = dict(DEFAULT_HEADERS)
    if overrides:
        merged.update(overrides)
    return {name: header_value(value) for name, value in merged.items()}


async def resolve_header(name: str, value: HeaderValue) -> Optional[str]:
    """
    Resolve a single header value.

    Returns:
        The header string, or None if the computation failed. Failures are
        logged and never raised.
    """
    if isinstance(value, LiteralHeader):
        return value.value or ""

    try:
        result = value.compute()
        if inspect.isawaitable(result):
            result = await result
        return str(result)
    except Exception as e:
        logger.error(f"Failed Header [{name}] evaluation caused by: {e}")
        return None


async def resolve_headers(header_map: Mapping[str, HeaderValue]) -> Dict[str, str]:
    """
    Resolve every header concurrently and wait for all of them.

    Headers whose computation fails are left out of the result.
    """
    names = list(header_map)
    values: Tuple[Optional[str], ...] = tuple(
        await asyncio.gather(*(resolve_header(name, header_map[name]) for name in names))
    )
    return {name: value for name, value in zip(names, values) if value is not None}
