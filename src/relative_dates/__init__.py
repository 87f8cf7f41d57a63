"""Relative dates: "10s", "8m ago", "Yesterday 8:45", "5 Aug 2012"."""
from __future__ import annotations

from .formatter import make_relative_date
from .models import FormatLevel, FormatOptions
from .sync import init_relative_dates, replace_locale_timestamps
from .utils.time import parse_instant

__all__ = [
    "FormatLevel",
    "FormatOptions",
    "init_relative_dates",
    "make_relative_date",
    "parse_instant",
    "replace_locale_timestamps",
]
