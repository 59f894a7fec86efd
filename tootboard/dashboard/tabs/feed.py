"""Feed pane — a list of statuses or notifications beside a detail view."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.css.query import NoMatches
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from ...render import (
    mode_bar,
    notification_detail,
    notification_row,
    placeholder_row,
    status_detail,
    status_row,
)
from ...views import LoadStatus, Tab, ViewState
from .base import TabBase

FALLBACK_WIDTH = 40

LOADING_ROWS = {
    Tab.TIMELINE: ("Loading timeline...", "Fetching latest statuses..."),
    Tab.PROFILE: ("Loading profile...", "Fetching latest statuses..."),
    Tab.NOTIFICATIONS: ("Loading notifications...", "Fetching notifications..."),
    Tab.METRICS: ("Loading metrics...", "Scanning groups..."),
}


class FeedPane(TabBase):
    """List of feed items on the left, the selected item in full on the right.

    The pane keeps no feed data of its own: ``show`` redraws it from the
    controller's frame, and the list is only rebuilt when the view's items
    have changed.
    """

    DEFAULT_CSS = """
    FeedPane {
        height: 100%;
    }
    FeedPane .header-bar {
        height: 1;
        padding: 0 1;
    }
    FeedPane .feed-body {
        height: 1fr;
    }
    FeedPane .feed-list {
        width: 1fr;
        min-width: 30;
        height: 100%;
        border-right: solid $panel-darken-2;
    }
    FeedPane .feed-detail {
        width: 1fr;
        height: 100%;
        padding: 0 1;
    }
    """

    def __init__(self, show_header: bool = False, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._show_header = show_header
        self._rendered_key: tuple | None = None

    def compose(self) -> ComposeResult:
        if self._show_header:
            yield Static("", classes="header-bar")
        with Horizontal(classes="feed-body"):
            yield OptionList(classes="feed-list")
            with VerticalScroll(classes="feed-detail"):
                yield Static("", classes="detail-text")

    # -- Rendering ----------------------------------------------------------

    def _list_width(self) -> int:
        try:
            width = self.query_one(OptionList).size.width
        except NoMatches:
            return FALLBACK_WIDTH
        return width or FALLBACK_WIDTH

    def _detail_width(self) -> int:
        try:
            width = self.query_one(".feed-detail", VerticalScroll).size.width
        except NoMatches:
            return FALLBACK_WIDTH
        return max(20, (width or FALLBACK_WIDTH) - 2)

    def render_header(self) -> Text | None:
        if self._frame is None or self._frame.tab is not Tab.TIMELINE:
            return None
        return mode_bar(self._frame.mode, self._palette)

    def render_row(self, item: Any, width: int) -> Text:
        if self._frame is not None and self._frame.tab is Tab.NOTIFICATIONS:
            return notification_row(item, width, self._palette)
        return status_row(item, width, self._palette)

    def render_detail(self, view: ViewState) -> Text | str:
        item = view.selected_item
        if item is None:
            if view.is_loading:
                return LOADING_ROWS.get(view.view_id.tab, ("Loading...", ""))[0]
            if view.status is LoadStatus.ERROR:
                return f"Error: {view.error_message}"
            return "No item selected."
        if view.view_id.tab is Tab.NOTIFICATIONS:
            return notification_detail(item, self._detail_width(), self._palette)
        return status_detail(item, self._detail_width(), self._palette)

    def _placeholder(self, view: ViewState) -> Text:
        if view.is_loading or view.status is LoadStatus.IDLE:
            title, snippet = LOADING_ROWS.get(view.view_id.tab, ("Loading...", ""))
        elif view.status is LoadStatus.ERROR:
            title, snippet = "Could not load", view.error_message
        else:
            title, snippet = f"No {view.noun}", "Nothing to show here yet."
        return placeholder_row(title, snippet, self._palette)

    def _populate_list(self, view: ViewState) -> None:
        placeholder = None if view.items else (view.status, view.error_message)
        key = (view.view_id, view.revision, placeholder)
        option_list = self.query_one(OptionList)
        # Highlight changes made here mirror the controller; don't echo them back.
        with option_list.prevent(OptionList.OptionHighlighted):
            if key != self._rendered_key:
                self._rendered_key = key
                option_list.clear_options()
                if view.items:
                    width = self._list_width()
                    option_list.add_options(Option(self.render_row(item, width)) for item in view.items)
                else:
                    option_list.add_option(Option(self._placeholder(view), disabled=True))
            if view.items and option_list.highlighted != view.selected_index:
                option_list.highlighted = view.selected_index

    def _refresh(self) -> None:
        frame = self._frame
        if frame is None or frame.view is None:
            return
        try:
            if self._show_header:
                header = self.render_header()
                self.query_one(".header-bar", Static).update(header or "")
            self._populate_list(frame.view)
            self.query_one(".detail-text", Static).update(self.render_detail(frame.view))
        except NoMatches:
            # Not mounted yet; the next frame redraws everything.
            self._rendered_key = None

    def focus_list(self) -> None:
        try:
            self.query_one(OptionList).focus()
        except NoMatches:
            pass
