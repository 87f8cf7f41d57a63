"""TimestampApp: Textual app that keeps a list of timestamps relative to now."""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
import logging

from textual.app import App, ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.timer import Timer
from textual.widgets import Footer, Header

from .config import SyncConfig, load_config
from .sync import init_relative_dates, replace_locale_timestamps
from .utils.time import now_ms, parse_instant
from .widgets import Timestamp

logger = logging.getLogger(__name__)

PLACEHOLDER_TIME = "--:--"


@dataclass
class TimestampEntry:
    instant: str             # ISO-8601 string stored in the datetime attribute
    text: str | None = None  # original visible text; defaults to the instant


class TimestampApp(App[None]):
    """One row per entry: local short time, then the relative date.

    Both sync passes run on mount; the relative pass is repeated every
    ``config.refresh_interval`` seconds and on the ``r`` binding.
    """

    TITLE = "relative-dates"

    BINDINGS = [
        ("r", "refresh_dates", "Refresh"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    .timestamp-row {
        height: 1;
    }
    """

    def __init__(
        self,
        entries: Iterable[TimestampEntry],
        config: SyncConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        super().__init__()
        self._entries = list(entries)
        self._config = config if config is not None else load_config()
        self._clock = clock
        self._refresh_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll():
            for entry in self._entries:
                epoch_ms = parse_instant(entry.instant, self._config.timezone)
                with Horizontal(classes="timestamp-row"):
                    if epoch_ms is None:
                        yield Timestamp(PLACEHOLDER_TIME)
                    else:
                        yield Timestamp.locale(epoch_ms, PLACEHOLDER_TIME)
                    yield Timestamp.relative(entry.instant, entry.text or entry.instant)
        yield Footer()

    def on_mount(self) -> None:
        replace_locale_timestamps(self, tz=self._config.timezone)
        self.refresh_dates()
        self._refresh_timer = self.set_interval(self._config.refresh_interval, self.refresh_dates)

    def refresh_dates(self) -> int:
        """Recompute every relative timestamp against the current clock."""
        updated = init_relative_dates(
            self,
            self._config.options(),
            now=self._clock(),
            tz=self._config.timezone,
        )
        logger.debug("Refreshed %d of %d timestamps", updated, len(self._entries))
        return updated

    def action_refresh_dates(self) -> None:
        self.refresh_dates()
