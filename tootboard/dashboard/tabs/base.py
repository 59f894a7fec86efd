"""Base class for all dashboard tab panes."""

from __future__ import annotations

from textual.widget import Widget

from ...config import Theme
from ...views import Frame


class TabBase(Widget):
    DEFAULT_CSS = """
    TabBase { height: 100%; }
    """

    def __init__(self, theme: Theme | None = None, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._palette = theme or Theme()
        self._frame: Frame | None = None

    def show(self, frame: Frame) -> None:
        self._frame = frame
        self._refresh()

    def _refresh(self) -> None:
        """Override in subclasses to update UI from self._frame."""
        pass
