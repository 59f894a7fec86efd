"""Tootboard Dashboard — Textual TUI app.

Launch with: tootboard ui
"""

from __future__ import annotations

import logging
import queue
from typing import Any, Iterable

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, Label, OptionList, TabbedContent, TabPane
from textual.worker import get_current_worker

from ..config import Config, Theme
from ..controller import Controller
from ..fetchers import run_fetch
from ..progress import ProgressReporter
from ..views import FetchRequest, LoadStatus, Outcome, Tab, TimelineMode
from .messages import FeedFetched, MetricsProgress
from .tabs.base import TabBase
from .tabs.feed import FeedPane
from .tabs.metrics import MetricsPane
from .tabs.search import SearchPane
from .widgets.status_badge import StatusBadge

logger = logging.getLogger(__name__)

LISTEN_TIMEOUT = 0.5


class TootboardApp(App):
    """Tootboard TUI dashboard built with Textual.

    Five tabs: Timeline, Search, Profile, Metrics, Notifications.
    All feed state lives in the ``Controller``; the app runs the fetches it
    asks for on worker threads and redraws the active tab from its frame.
    """

    TITLE = "tootboard"

    CSS = """
    #status-line {
        height: 1;
        dock: bottom;
        background: $panel;
    }
    #notice {
        width: 1fr;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        Binding("t", "show_tab('timeline')", "Timeline", show=False),
        Binding("s", "show_tab('search')", "Search", show=False),
        Binding("p", "show_tab('profile')", "Profile", show=False),
        Binding("m", "show_tab('metrics')", "Metrics", show=False),
        Binding("n", "show_tab('notifications')", "Notifications", show=False),
        Binding("tab", "next_tab", "Next tab", show=False, priority=True),
        Binding("shift+tab", "previous_tab", "Previous tab", show=False, priority=True),
        Binding("h", "select_mode('home')", "Home", show=False),
        Binding("l", "select_mode('local')", "Local", show=False),
        Binding("f", "select_mode('federated')", "Federated", show=False),
        Binding("g", "select_mode('trending')", "Trending", show=False),
        Binding("T", "select_mode('trending')", "Trending", show=False),
        Binding("7", "select_range(7)", "7 days", show=False),
        Binding("3", "select_range(30)", "30 days", show=False),
        Binding("j", "move(1)", "Down", show=False),
        Binding("k", "move(-1)", "Up", show=False),
    ]

    def __init__(self, client: Any, theme: Theme | None = None, metrics_range: int = 7,
                 **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._palette = theme or Theme()
        self.controller = Controller(metrics_range=metrics_range)

    def compose(self) -> ComposeResult:
        yield Header()
        with TabbedContent(id="tabs"):
            with TabPane("Timeline [T]", id=Tab.TIMELINE.value):
                yield FeedPane(show_header=True, theme=self._palette, id="timeline-tab")
            with TabPane("Search [S]", id=Tab.SEARCH.value):
                yield SearchPane(theme=self._palette, id="search-tab")
            with TabPane("Profile [P]", id=Tab.PROFILE.value):
                yield FeedPane(theme=self._palette, id="profile-tab")
            with TabPane("Metrics [M]", id=Tab.METRICS.value):
                yield MetricsPane(theme=self._palette, id="metrics-tab")
            with TabPane("Notifications [N]", id=Tab.NOTIFICATIONS.value):
                yield FeedPane(theme=self._palette, id="notifications-tab")
        with Horizontal(id="status-line"):
            yield StatusBadge(id="badge")
            yield Label("", id="notice")
        yield Footer()

    def on_mount(self) -> None:
        self._start_fetches(self.controller.start())
        self._redraw()

    # -- Actions ------------------------------------------------------------

    def action_show_tab(self, tab_id: str) -> None:
        # Switching the TabbedContent fires TabActivated, which tells the controller.
        try:
            self.query_one(TabbedContent).active = tab_id
        except NoMatches:
            self._select_tab(Tab(tab_id))

    def action_next_tab(self) -> None:
        self._start_fetches(self.controller.next_tab())
        self._sync_tabs()

    def action_previous_tab(self) -> None:
        self._start_fetches(self.controller.previous_tab())
        self._sync_tabs()

    def action_select_mode(self, mode: str) -> None:
        self._start_fetches(self.controller.select_mode(TimelineMode(mode)))
        self._redraw()

    def action_select_range(self, days: int) -> None:
        self._start_fetches(self.controller.select_metrics_range(days))
        self._redraw()

    def action_refresh(self) -> None:
        self._start_fetches(self.controller.refresh())
        self._redraw()

    def action_move(self, delta: int) -> None:
        self.controller.move_selection(delta)
        self._redraw()

    # -- Events -------------------------------------------------------------

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        pane_id = event.pane.id if event.pane is not None else None
        if pane_id is None:
            return
        tab = Tab(pane_id)
        if tab is not self.controller.active_tab:
            self._select_tab(tab)

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        view = self.controller.active_view
        if view is None or not view.items:
            return
        try:
            pane = self.query_one(f"#{self.controller.active_tab.value}-tab", FeedPane)
            active_list = pane.query_one(OptionList)
        except NoMatches:
            return
        if event.option_list is not active_list:
            return
        if event.option_index != view.selected_index:
            self.controller.select_index(event.option_index)
            self._redraw()

    def on_feed_fetched(self, event: FeedFetched) -> None:
        result = event.result
        outcome = self.controller.apply_result(result)
        view = self.controller.views[result.view_id]
        if outcome is Outcome.FAILED:
            self.notify(f"{view.title}: {result.error}", severity="error", timeout=4)
        elif result.view_id == self.controller.view_id_for(self.controller.active_tab):
            self.notify(view.notice, timeout=2)
        self._redraw()

    def on_metrics_progress(self, event: MetricsProgress) -> None:
        if self.controller.apply_progress(event.reporter, event.scanned):
            self._listen_progress(event.reporter)
        self._redraw()

    # -- Workers ------------------------------------------------------------

    def _start_fetches(self, requests: Iterable[FetchRequest]) -> None:
        for request in requests:
            self._run_fetch(request)
            if request.reporter is not None:
                self._listen_progress(request.reporter)

    @work(thread=True)
    def _run_fetch(self, request: FetchRequest) -> None:
        """Run one fetch in a background thread and post the result back."""
        result = run_fetch(self._client, request)
        self.post_message(FeedFetched(result))

    @work(thread=True)
    def _listen_progress(self, reporter: ProgressReporter) -> None:
        """Wait for the next progress tick and post it to the UI loop."""
        worker = get_current_worker()
        while not worker.is_cancelled:
            try:
                scanned = reporter.receive(timeout=LISTEN_TIMEOUT)
            except queue.Empty:
                continue
            self.post_message(MetricsProgress(reporter, scanned))
            return

    # -- Rendering ----------------------------------------------------------

    def _select_tab(self, tab: Tab) -> None:
        self._start_fetches(self.controller.select_tab(tab))
        self._redraw()

    def _sync_tabs(self) -> None:
        try:
            self.query_one(TabbedContent).active = self.controller.active_tab.value
        except NoMatches:
            pass
        self._redraw()

    def _redraw(self) -> None:
        """Redraw the active tab and the status line from the controller."""
        frame = self.controller.frame()
        try:
            pane = self.query_one(f"#{frame.tab.value}-tab", TabBase)
        except NoMatches:
            return
        pane.show(frame)
        if isinstance(pane, FeedPane):
            pane.focus_list()

        view = frame.view
        self.sub_title = view.title if view is not None else frame.tab.label
        try:
            badge = self.query_one(StatusBadge)
            notice = self.query_one("#notice", Label)
        except NoMatches:
            return
        badge.set_status(view.status if view is not None else LoadStatus.IDLE)
        notice.update(view.notice if view is not None else "")


def run_dashboard(client: Any, config: Config, metrics_range: int = 7) -> None:
    """Run the dashboard until the user quits."""
    app = TootboardApp(client, theme=config.theme, metrics_range=metrics_range)
    try:
        app.run()
    except Exception:
        logger.exception("Dashboard crashed")
        raise
