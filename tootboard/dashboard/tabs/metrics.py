"""Metrics tab — daily follows, likes and boosts with a stacked bar chart."""

from __future__ import annotations

from typing import Any

from rich.text import Text

from ...metrics.chart import render_chart, render_loading
from ...render import metric_row, range_bar
from ...views import LoadStatus, MetricsViewState, ViewState
from ..widgets.status_badge import SPINNER_FRAMES
from .feed import FeedPane


class MetricsPane(FeedPane):
    """One row per day on the left, the chart for the whole window on the right.

    While a scan runs the detail shows a spinner and the number of
    notification groups scanned so far.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(show_header=True, **kwargs)
        self._spinner_index = 0

    def on_mount(self) -> None:
        self.set_interval(0.1, self._tick_spinner)

    def _tick_spinner(self) -> None:
        frame = self._frame
        if frame is None or frame.view is None or not frame.view.is_loading:
            return
        self._spinner_index = (self._spinner_index + 1) % len(SPINNER_FRAMES)
        self._refresh()

    def render_header(self) -> Text | None:
        if self._frame is None:
            return None
        return range_bar(self._frame.metrics_range, self._palette)

    def render_row(self, item: Any, width: int) -> Text:
        return metric_row(item, self._palette)

    def render_detail(self, view: ViewState) -> Text | str:
        assert isinstance(view, MetricsViewState)
        if not view.items:
            if view.is_loading:
                return render_loading(
                    view.shown_range,
                    view.progress_scanned,
                    view.progress_active,
                    SPINNER_FRAMES[self._spinner_index],
                )
            if view.status is LoadStatus.ERROR:
                return f"Error: {view.error_message}"
            return "No metrics yet."
        chart = render_chart(view.items, self._detail_width(), view.selected_index, self._palette)
        if view.is_loading:
            loading = render_loading(
                view.shown_range,
                view.progress_scanned,
                view.progress_active,
                SPINNER_FRAMES[self._spinner_index],
            )
            return Text(loading + "\n\n").append_text(chart)
        return chart
