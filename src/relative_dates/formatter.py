"""Relative date formatting: "10s", "8m ago", "Yesterday 8:45", "5 Aug 2012".

Two bucketing schemes live side by side:

- ``elapsed_bucket`` (short/med) looks only at the elapsed duration, so an
  instant 16 hours old reads "16h" even when it was before midnight.
- ``calendar_bucket`` (standard/long) compares local calendar dates, so the
  same instant reads "Yesterday 19:43".

Both share ``sub_day_bucket`` for the seconds/minutes/hours range.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, tzinfo
import logging
import math

from .models import (
    AbsoluteDate,
    Days,
    FormatLevel,
    FormatOptions,
    Hours,
    Minutes,
    RecentWeekday,
    Seconds,
    TimeBucket,
    Yesterday,
)
from .utils.time import now_ms, parse_instant, to_local

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# At or beyond five days every level shows the plain date
ABSOLUTE_DATE_AFTER = 5 * SECONDS_PER_DAY
RECENT_WEEKDAY_MAX_DAYS = 4


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _absolute(then: datetime) -> AbsoluteDate:
    return AbsoluteDate(day=then.day, month=then.month, year=then.year)


def sub_day_bucket(elapsed_seconds: float) -> TimeBucket:
    """Seconds are floored; minutes and hours round half-up (90s -> 2m)."""
    if elapsed_seconds < SECONDS_PER_MINUTE:
        return Seconds(math.floor(elapsed_seconds))
    if elapsed_seconds < SECONDS_PER_HOUR:
        return Minutes(_round_half_up(elapsed_seconds / SECONDS_PER_MINUTE))
    return Hours(_round_half_up(elapsed_seconds / SECONDS_PER_HOUR))


def elapsed_bucket(elapsed_seconds: float, then: datetime) -> TimeBucket:
    """Bucket by wall-clock duration only, ignoring calendar boundaries."""
    if elapsed_seconds < SECONDS_PER_DAY:
        return sub_day_bucket(elapsed_seconds)
    if elapsed_seconds < ABSOLUTE_DATE_AFTER:
        return Days(_round_half_up(elapsed_seconds / SECONDS_PER_DAY))
    return _absolute(then)


def calendar_bucket(elapsed_seconds: float, then: datetime, today: datetime) -> TimeBucket:
    """Bucket by the number of local calendar days between ``then`` and ``today``."""
    if elapsed_seconds >= ABSOLUTE_DATE_AFTER:
        return _absolute(then)

    day_diff = (today.date() - then.date()).days
    if day_diff < 1:
        if elapsed_seconds >= SECONDS_PER_DAY:
            # 25-hour local day when clocks go back
            return Days(_round_half_up(elapsed_seconds / SECONDS_PER_DAY))
        return sub_day_bucket(elapsed_seconds)
    if day_diff == 1:
        return Yesterday(hour=then.hour, minute=then.minute)
    if day_diff <= RECENT_WEEKDAY_MAX_DAYS:
        return RecentWeekday(
            weekday=then.weekday(),
            day=then.day,
            month=then.month,
            year=then.year,
        )
    return _absolute(then)


def make_relative_date(
    instant: object,
    options: FormatOptions | Mapping[str, object] | None = None,
    *,
    now: object = None,
    tz: tzinfo | None = None,
) -> str | None:
    """Describe how long ago ``instant`` was, or return ``None`` to leave the display alone.

    Args:
        instant: Epoch milliseconds, ISO-8601 string or datetime.
        options: ``FormatOptions`` or a mapping with ``format``/``notAfter``.
        now:     Reference instant (same forms as ``instant``); defaults to the clock.
        tz:      Timezone for calendar comparison and rendering; defaults to local.

    Returns ``None`` when the instant cannot be parsed, lies in the future, or
    is older than ``options.not_after`` seconds.
    """
    if options is None:
        options = FormatOptions()
    elif isinstance(options, Mapping):
        options = FormatOptions.from_mapping(options)

    epoch_ms = parse_instant(instant, tz)
    if epoch_ms is None:
        return None

    current_ms = now_ms() if now is None else parse_instant(now, tz)
    if current_ms is None:
        logger.debug("Invalid reference time %r", now)
        return None

    if epoch_ms > current_ms:
        logger.debug("Instant %d is %d ms in the future", epoch_ms, epoch_ms - current_ms)
        return None

    elapsed_seconds = (current_ms - epoch_ms) / 1000
    if options.not_after is not None and elapsed_seconds > options.not_after:
        logger.debug("Instant %d is older than notAfter=%s", epoch_ms, options.not_after)
        return None

    then = to_local(epoch_ms, tz)
    if options.format.is_elapsed_based:
        bucket = elapsed_bucket(elapsed_seconds, then)
    else:
        bucket = calendar_bucket(elapsed_seconds, then, to_local(current_ms, tz))

    return bucket.render(options.format)
