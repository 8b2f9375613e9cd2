"""
cachebridge — Expiration Normalization

Items accept several shapes of expiration input. They are first mapped onto one
of three variants and only then resolved to an integer epoch timestamp, where
0 means "never expires".
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..errors import InvalidArgumentError

NEVER = 0


@dataclass(frozen=True, slots=True)
class AbsoluteTime:
    """Expire at a calendar moment."""

    at: datetime


@dataclass(frozen=True, slots=True)
class RelativeDuration:
    """Expire a number of seconds after the moment of resolution."""

    seconds: int


@dataclass(frozen=True, slots=True)
class NoExpiry:
    """Never expire."""


Expiry = AbsoluteTime | RelativeDuration | NoExpiry


def now() -> int:
    """Current epoch time in whole seconds. The one clock items and pools read."""
    return int(time.time())


def absolute(value: Any) -> Expiry:
    """
    Map an expires_at() argument onto a variant.

    Raises:
        InvalidArgumentError: value is neither a datetime nor None
    """
    if isinstance(value, datetime):
        return AbsoluteTime(value)
    if value is None:
        return NoExpiry()

    type_name = type(value).__name__
    raise InvalidArgumentError(
        f"expires_at() expects a datetime or None, {type_name} given",
        details={"argument": "expiration", "type": type_name},
    )


def relative(value: Any) -> Expiry:
    """
    Map an expires_after() argument onto a variant.

    bool is rejected even though it subclasses int.

    Raises:
        InvalidArgumentError: value is not a timedelta, an int, or None
    """
    if isinstance(value, timedelta):
        return RelativeDuration(int(value.total_seconds()))
    if isinstance(value, int) and not isinstance(value, bool):
        return RelativeDuration(value)
    if value is None:
        return NoExpiry()

    type_name = type(value).__name__
    raise InvalidArgumentError(
        f"Invalid time: {value!r} ({type_name}). Must be an int, a timedelta or None.",
        details={"argument": "time", "value": repr(value), "type": type_name},
    )


def resolve(expiry: Expiry, current: int | None = None) -> int:
    """Resolve a variant to epoch seconds; NoExpiry resolves to NEVER."""
    match expiry:
        case AbsoluteTime(at=at):
            return int(at.timestamp())
        case RelativeDuration(seconds=seconds):
            return (now() if current is None else current) + seconds
        case NoExpiry():
            return NEVER


def ttl_for(expiration: int, current: int | None = None) -> int:
    """
    Convert an absolute expiration into the TTL a backing store expects.

    Returns 0 for NEVER, otherwise the remaining seconds (which may be zero or
    negative for timestamps already in the past).
    """
    if expiration == NEVER:
        return 0
    return expiration - (now() if current is None else current)
