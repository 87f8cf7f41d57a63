from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from relative_dates.models import FormatOptions
from relative_dates.sync import (
    default_locale_time,
    init_relative_dates,
    replace_locale_timestamps,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TZ = timezone(timedelta(hours=1))

# 2012-08-13T19:43:00.000Z
NOW_MS = 1_344_886_980_000


class FakeElement:
    """Stand-in for a document element with classes and attributes."""

    def __init__(self, text: str, classes: str, attributes: dict[str, str] | None = None) -> None:
        self.text = text
        self.classes = set(classes.split())
        self.attributes = dict(attributes or {})

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value


class FakeDocument:
    """Supports the single-class selectors the sync passes use."""

    def __init__(self, *elements: FakeElement) -> None:
        self.elements = list(elements)

    def query(self, selector: str) -> list[FakeElement]:
        class_name = selector.lstrip(".")
        return [el for el in self.elements if class_name in el.classes]


@pytest.fixture
def invalid() -> FakeElement:
    return FakeElement("Last Tuesday", "js-timestamp", {"datetime": "201-08-12agd18:43:00.000Z"})


@pytest.fixture
def valid() -> FakeElement:
    return FakeElement("12th August", "js-timestamp", {"datetime": "2012-08-12T18:43:00.000Z"})


@pytest.fixture
def locale() -> FakeElement:
    return FakeElement(
        "16:00",
        "js-locale-timestamp",
        {"datetime": "2014-06-13T17:00:00+0100", "data-timestamp": "1402675200000"},
    )


@pytest.fixture
def document(invalid, valid, locale) -> FakeDocument:
    return FakeDocument(invalid, valid, locale)


# ---------------------------------------------------------------------------
# Relative pass
# ---------------------------------------------------------------------------


class TestInitRelativeDates:
    def test_valid_timestamp_is_rewritten(self, document, valid):
        updated = init_relative_dates(document, now=NOW_MS, tz=TZ)

        assert updated == 1
        assert valid.text == "Yesterday 19:43"
        assert valid.get_attribute("title") == "12th August"

    def test_invalid_timestamp_is_left_alone(self, document, invalid):
        init_relative_dates(document, now=NOW_MS, tz=TZ)

        assert invalid.text == "Last Tuesday"
        assert invalid.get_attribute("title") is None

    def test_title_is_only_set_once(self, document, valid):
        init_relative_dates(document, now=NOW_MS, tz=TZ)
        init_relative_dates(document, now=NOW_MS + 60_000, tz=TZ)

        assert valid.text == "Yesterday 19:43"
        assert valid.get_attribute("title") == "12th August"

    def test_existing_title_is_kept(self, valid):
        valid.set_attribute("title", "Sunday 12 August 2012")
        init_relative_dates(FakeDocument(valid), now=NOW_MS, tz=TZ)

        assert valid.get_attribute("title") == "Sunday 12 August 2012"
        assert valid.text == "Yesterday 19:43"

    def test_recomputes_from_stored_instant(self, valid):
        doc = FakeDocument(valid)
        init_relative_dates(doc, now=NOW_MS, tz=TZ)
        # Six days on, the element shows the absolute date, not a mangled "Yesterday"
        init_relative_dates(doc, now=NOW_MS + 5 * 86_400_000, tz=TZ)

        assert valid.text == "12 Aug 2012"

    def test_options_are_forwarded(self, document, valid):
        init_relative_dates(document, FormatOptions(format="med"), now=NOW_MS, tz=TZ)
        assert valid.text == "1d ago"

    def test_not_after_leaves_element_unchanged(self, document, valid):
        updated = init_relative_dates(document, FormatOptions(not_after=3600), now=NOW_MS, tz=TZ)

        assert updated == 0
        assert valid.text == "12th August"
        assert valid.get_attribute("title") is None

    def test_future_timestamp_is_left_alone(self, valid):
        updated = init_relative_dates(FakeDocument(valid), now=NOW_MS - 86_400_000 * 2, tz=TZ)

        assert updated == 0
        assert valid.text == "12th August"

    def test_element_without_datetime_is_skipped(self, valid):
        bare = FakeElement("sometime", "js-timestamp")
        updated = init_relative_dates(FakeDocument(bare, valid), now=NOW_MS, tz=TZ)

        assert updated == 1
        assert bare.text == "sometime"
        assert bare.attributes == {}

    def test_locale_elements_are_not_touched(self, document, locale):
        init_relative_dates(document, now=NOW_MS, tz=TZ)
        assert locale.text == "16:00"

    def test_defaults_to_clock(self, monkeypatch, valid):
        import relative_dates.sync as sync

        monkeypatch.setattr(sync, "now_ms", lambda: NOW_MS)
        init_relative_dates(FakeDocument(valid), tz=TZ)
        assert valid.text == "Yesterday 19:43"


# ---------------------------------------------------------------------------
# Locale pass
# ---------------------------------------------------------------------------


class TestReplaceLocaleTimestamps:
    def test_converts_to_viewer_timezone(self, document, locale):
        updated = replace_locale_timestamps(document, tz=TZ)

        assert updated == 1
        assert locale.text == "17:00"

    def test_is_idempotent(self, document, locale):
        replace_locale_timestamps(document, tz=TZ)
        first = locale.text
        replace_locale_timestamps(document, tz=TZ)

        assert locale.text == first == "17:00"

    def test_uses_injected_formatter(self, document, locale):
        seen: list[datetime] = []

        def twelve_hour(moment: datetime) -> str:
            seen.append(moment)
            return moment.strftime("%I:%M %p")

        replace_locale_timestamps(document, locale_time=twelve_hour, tz=TZ)

        assert locale.text == "05:00 PM"
        assert seen[0].utcoffset() == timedelta(hours=1)

    def test_does_not_set_title(self, document, locale):
        replace_locale_timestamps(document, tz=TZ)
        assert locale.get_attribute("title") is None

    @pytest.mark.parametrize("raw", ["", "soon", "2014-06-13T17:00:00+0100"])
    def test_invalid_epoch_is_left_alone(self, raw):
        element = FakeElement("16:00", "js-locale-timestamp", {"data-timestamp": raw})
        updated = replace_locale_timestamps(FakeDocument(element), tz=TZ)

        assert updated == 0
        assert element.text == "16:00"

    def test_relative_elements_are_not_touched(self, document, valid):
        replace_locale_timestamps(document, tz=TZ)
        assert valid.text == "12th August"


def test_default_locale_time_is_hours_and_minutes():
    assert default_locale_time(datetime(2014, 6, 13, 17, 0, tzinfo=TZ)) == "17:00"
