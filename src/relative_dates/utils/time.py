"""Instant parsing and clock helpers.

An instant is an ``int`` count of milliseconds since the Unix epoch. Every
parser here returns ``None`` instead of raising when the input cannot be
resolved to a point in time.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
import logging
import time

from dateutil.parser import isoparse

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_local(epoch_ms: int, tz: tzinfo | None = None) -> datetime:
    """Return an aware datetime for ``epoch_ms`` in ``tz``.

    ``tz=None`` means the system local timezone.
    """
    return (EPOCH + timedelta(milliseconds=epoch_ms)).astimezone(tz)


def _datetime_to_ms(value: datetime, tz: tzinfo | None) -> int:
    if value.tzinfo is None or value.utcoffset() is None:
        # Naive wall time belongs to the formatting timezone
        value = value.replace(tzinfo=tz) if tz is not None else value.astimezone()
    return (value - EPOCH) // _ONE_MS


def parse_instant(value: object, tz: tzinfo | None = None) -> int | None:
    """Resolve ``value`` to epoch milliseconds, or ``None`` if it is not a valid instant.

    Accepts:
      - ``int`` epoch milliseconds (an existing instant)
      - finite ``float`` epoch milliseconds (fraction truncated)
      - ``datetime`` (naive values are read in ``tz``)
      - ISO-8601 strings such as ``2012-08-12T18:43:00.000Z`` or
        ``2014-06-13T17:00:00+0100`` (naive strings are read in ``tz``)
    """
    if isinstance(value, bool):
        return None

    try:
        if isinstance(value, int):
            epoch_ms = value
        elif isinstance(value, float):
            # int() rejects nan/inf with ValueError/OverflowError
            epoch_ms = int(value)
        elif isinstance(value, datetime):
            epoch_ms = _datetime_to_ms(value, tz)
        elif isinstance(value, str):
            epoch_ms = _datetime_to_ms(isoparse(value.strip()), tz)
        else:
            logger.debug("Unsupported instant type: %s", type(value).__name__)
            return None
        # Reject values the platform cannot represent as a local datetime
        to_local(epoch_ms, tz)
    except (ValueError, OverflowError, OSError) as exc:
        logger.debug("Unparseable instant %r: %s", value, exc)
        return None

    return epoch_ms


def parse_epoch_ms(raw: str | None) -> int | None:
    """Parse a numeric epoch-milliseconds attribute such as ``"1402675200000"``."""
    if raw is None:
        return None
    try:
        epoch_ms = int(raw.strip())
        to_local(epoch_ms)
    except (ValueError, OverflowError, OSError):
        logger.debug("Invalid epoch milliseconds: %r", raw)
        return None
    return epoch_ms
