"""Keep timestamp elements in a document in step with the clock.

A document is anything with a ``query(selector)`` method yielding elements
that expose ``text`` plus ``get_attribute``/``set_attribute``. The Textual
DOM satisfies this through :class:`relative_dates.widgets.Timestamp`.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, tzinfo
import logging
from typing import Protocol

from .formatter import make_relative_date
from .models import FormatOptions
from .utils.time import now_ms, parse_epoch_ms, to_local

logger = logging.getLogger(__name__)

RELATIVE_CLASS = "js-timestamp"
LOCALE_CLASS = "js-locale-timestamp"
DATETIME_ATTR = "datetime"
EPOCH_ATTR = "data-timestamp"
TITLE_ATTR = "title"


class TimestampElement(Protocol):
    text: str

    def get_attribute(self, name: str) -> str | None: ...

    def set_attribute(self, name: str, value: str) -> None: ...


class ElementRoot(Protocol):
    def query(self, selector: str) -> Iterable[TimestampElement]: ...


LocaleTime = Callable[[datetime], str]


def default_locale_time(moment: datetime) -> str:
    """Short local time, e.g. "17:00"."""
    return moment.strftime("%H:%M")


def init_relative_dates(
    root: ElementRoot,
    options: FormatOptions | None = None,
    *,
    now: int | None = None,
    tz: tzinfo | None = None,
) -> int:
    """Rewrite every relative timestamp element under ``root``.

    The element's original text is kept as its title the first time it is
    replaced. Elements whose instant cannot be formatted are left untouched.

    Returns the number of elements whose text was written.
    """
    if now is None:
        now = now_ms()

    updated = 0
    for element in root.query(f".{RELATIVE_CLASS}"):
        raw = element.get_attribute(DATETIME_ATTR)
        if raw is None:
            logger.debug("Skipping timestamp element without %s attribute", DATETIME_ATTR)
            continue

        relative = make_relative_date(raw, options, now=now, tz=tz)
        if relative is None:
            logger.debug("Leaving timestamp %r unchanged", raw)
            continue

        if element.get_attribute(TITLE_ATTR) is None:
            element.set_attribute(TITLE_ATTR, element.text)
        element.text = relative
        updated += 1

    return updated


def replace_locale_timestamps(
    root: ElementRoot,
    *,
    locale_time: LocaleTime | None = None,
    tz: tzinfo | None = None,
) -> int:
    """Render every locale timestamp element under ``root`` as a local short time.

    Returns the number of elements whose text was written.
    """
    render = locale_time or default_locale_time

    updated = 0
    for element in root.query(f".{LOCALE_CLASS}"):
        epoch_ms = parse_epoch_ms(element.get_attribute(EPOCH_ATTR))
        if epoch_ms is None:
            logger.debug("Skipping locale timestamp without a valid %s", EPOCH_ATTR)
            continue

        element.text = render(to_local(epoch_ms, tz))
        updated += 1

    return updated
