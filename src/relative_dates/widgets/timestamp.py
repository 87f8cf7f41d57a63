"""Timestamp: Static widget that acts as a timestamp element for the sync passes."""
from __future__ import annotations

from collections.abc import Mapping

from textual.widgets import Static

from ..sync import DATETIME_ATTR, EPOCH_ATTR, LOCALE_CLASS, RELATIVE_CLASS, TITLE_ATTR


class Timestamp(Static):
    """A line of text carrying machine-readable timestamp attributes.

    Relative timestamps have the ``js-timestamp`` class and a ``datetime``
    attribute; locale timestamps have ``js-locale-timestamp`` and a
    ``data-timestamp`` attribute holding epoch milliseconds. The ``title``
    attribute is shown as the widget tooltip.

    The current text is always stored in ``_display_text`` for easy
    introspection in tests.
    """

    DEFAULT_CSS = """
    Timestamp {
        width: auto;
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        content: str = "",
        *,
        attributes: Mapping[str, str] | None = None,
        **kwargs: object,
    ) -> None:
        """Initialise the widget.

        Args:
            content:    Original visible text, e.g. "12th August".
            attributes: Element attributes such as ``{"datetime": "2012-08-12T18:43:00Z"}``.
            **kwargs:   Forwarded to :class:`textual.widgets.Static`.
        """
        kwargs.setdefault("markup", False)
        super().__init__(content, **kwargs)
        self._display_text: str = content
        self._element_attributes: dict[str, str] = dict(attributes or {})
        if TITLE_ATTR in self._element_attributes:
            self.tooltip = self._element_attributes[TITLE_ATTR]

    @classmethod
    def relative(cls, instant: str, content: str, **kwargs: object) -> Timestamp:
        """Build a relative timestamp element for an ISO-8601 ``instant``."""
        return cls(
            content,
            attributes={DATETIME_ATTR: instant},
            classes=RELATIVE_CLASS,
            **kwargs,
        )

    @classmethod
    def locale(cls, epoch_ms: int, content: str, **kwargs: object) -> Timestamp:
        """Build a locale timestamp element for ``epoch_ms``."""
        return cls(
            content,
            attributes={EPOCH_ATTR: str(epoch_ms)},
            classes=LOCALE_CLASS,
            **kwargs,
        )

    @property
    def text(self) -> str:
        return self._display_text

    @text.setter
    def text(self, value: str) -> None:
        self._display_text = value
        self.update(value)

    def get_attribute(self, name: str) -> str | None:
        return self._element_attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self._element_attributes[name] = value
        if name == TITLE_ATTR:
            self.tooltip = value
