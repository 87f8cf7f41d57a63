"""Format options and the time buckets a relative date is rendered from."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import ClassVar, Union

logger = logging.getLogger(__name__)


class FormatLevel(str, Enum):
    """Verbosity of a rendered relative date."""

    STANDARD = "standard"  # "10s", "Yesterday 8:45", "Tuesday 07 Aug 2012"
    SHORT = "short"        # "10s", "4d"
    MED = "med"            # "10s ago", "4d ago"
    LONG = "long"          # "10 seconds ago", "Yesterday 8:45"

    @property
    def is_elapsed_based(self) -> bool:
        """Terse levels bucket by elapsed duration, verbose ones by calendar date."""
        return self in (FormatLevel.SHORT, FormatLevel.MED)


@dataclass(frozen=True)
class FormatOptions:
    format: FormatLevel = FormatLevel.STANDARD
    not_after: float | None = None  # seconds; older instants are not formatted

    def __post_init__(self) -> None:
        if not isinstance(self.format, FormatLevel):
            object.__setattr__(self, "format", FormatLevel(self.format))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> FormatOptions:
        """Build options from a loose mapping such as ``{"format": "med", "notAfter": 3600}``.

        Unknown keys are ignored. An unknown format falls back to standard and
        a non-numeric cutoff is dropped, both with a debug log line. A negative
        or non-finite cutoff is dropped with a warning.
        """
        level = FormatLevel.STANDARD
        raw_format = raw.get("format")
        if raw_format is not None:
            try:
                level = FormatLevel(str(raw_format).lower())
            except ValueError:
                logger.debug("Unknown format %r, using standard", raw_format)

        not_after: float | None = None
        raw_cutoff = raw.get("notAfter", raw.get("not_after"))
        if raw_cutoff is not None and not isinstance(raw_cutoff, bool):
            try:
                not_after = float(raw_cutoff)
            except (TypeError, ValueError):
                logger.debug("Ignoring non-numeric notAfter %r", raw_cutoff)
            else:
                if not math.isfinite(not_after) or not_after < 0:
                    logger.warning("Ignoring notAfter=%r; it must be a non-negative number of seconds", raw_cutoff)
                    not_after = None

        return cls(format=level, not_after=not_after)


# ---------------------------------------------------------------------------
# Time buckets
# ---------------------------------------------------------------------------

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class _Count:
    """A whole number of elapsed units."""

    n: int
    unit: ClassVar[str] = ""

    def render(self, level: FormatLevel) -> str:
        """Examples for Minutes(8): short "8m", med "8m ago", long "8 minutes ago"."""
        if level is FormatLevel.LONG:
            plural = "" if self.n == 1 else "s"
            return f"{self.n} {self.unit}{plural} ago"
        if level is FormatLevel.MED:
            return f"{self.n}{self.unit[0]} ago"
        return f"{self.n}{self.unit[0]}"


class Seconds(_Count):
    unit = "second"


class Minutes(_Count):
    unit = "minute"


class Hours(_Count):
    unit = "hour"


class Days(_Count):
    unit = "day"


@dataclass(frozen=True)
class Yesterday:
    hour: int
    minute: int

    def render(self, level: FormatLevel) -> str:
        return f"Yesterday {self.hour}:{self.minute:02d}"


@dataclass(frozen=True)
class RecentWeekday:
    weekday: int  # Monday == 0
    day: int
    month: int
    year: int

    def render(self, level: FormatLevel) -> str:
        name = WEEKDAY_NAMES[self.weekday]
        month = MONTH_ABBREVIATIONS[self.month - 1]
        return f"{name} {self.day:02d} {month} {self.year}"


@dataclass(frozen=True)
class AbsoluteDate:
    day: int
    month: int
    year: int

    def render(self, level: FormatLevel) -> str:
        return f"{self.day} {MONTH_ABBREVIATIONS[self.month - 1]} {self.year}"


TimeBucket = Union[Seconds, Minutes, Hours, Days, Yesterday, RecentWeekday, AbsoluteDate]
