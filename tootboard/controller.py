"""Tab and view controller for the dashboard.

The controller owns one ViewState per feed and decides when feeds are fetched.
It never performs I/O: user commands return the ``FetchRequest``s to run in
the background, and results come back through ``apply_result`` on the UI
thread. A view's ``LOADING`` status allows at most one fetch per view at a
time. There is no cancellation, so a result is applied to the view it was
requested for even when that view is no longer on screen.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .progress import ProgressReporter
from .views import (
    TAB_ORDER,
    TIMELINE_TITLES,
    FeedResult,
    FetchRequest,
    Frame,
    LoadStatus,
    MetricsViewState,
    Outcome,
    Tab,
    TimelineMode,
    ViewId,
    ViewState,
)

logger = logging.getLogger(__name__)

METRICS_RANGES = (7, 30)

PROFILE_ID = ViewId(Tab.PROFILE)
NOTIFICATIONS_ID = ViewId(Tab.NOTIFICATIONS)
METRICS_ID = ViewId(Tab.METRICS)


def item_id(item: Any) -> Optional[str]:
    """Pagination id of a feed item (status id or newest notification id)."""
    value = getattr(item, "id", None) or getattr(item, "most_recent_id", None)
    return str(value) if value else None


class Controller:
    """Owns the dashboard's view states and the active tab and mode."""

    def __init__(self, metrics_range: int = 7) -> None:
        self.active_tab = Tab.TIMELINE
        self.timeline_mode = TimelineMode.HOME
        self.account_id: Optional[str] = None

        self.views: dict[ViewId, ViewState] = {}
        for mode in TimelineMode:
            view_id = ViewId.timeline(mode)
            self.views[view_id] = ViewState(view_id, TIMELINE_TITLES[mode])
        self.views[PROFILE_ID] = ViewState(PROFILE_ID, "Profile")
        self.views[NOTIFICATIONS_ID] = ViewState(
            NOTIFICATIONS_ID, "Notifications", noun="notifications"
        )
        self.views[METRICS_ID] = MetricsViewState(
            METRICS_ID, f"Metrics ({metrics_range}d)", range_days=metrics_range
        )

    # -- Lookups ------------------------------------------------------------

    def view_id_for(self, tab: Tab) -> Optional[ViewId]:
        if tab is Tab.TIMELINE:
            return ViewId.timeline(self.timeline_mode)
        if tab is Tab.SEARCH:
            return None
        return ViewId(tab)

    @property
    def active_view(self) -> Optional[ViewState]:
        view_id = self.view_id_for(self.active_tab)
        return self.views[view_id] if view_id else None

    @property
    def metrics_view(self) -> MetricsViewState:
        view = self.views[METRICS_ID]
        assert isinstance(view, MetricsViewState)
        return view

    def frame(self) -> Frame:
        return Frame(
            tab=self.active_tab,
            mode=self.timeline_mode,
            view=self.active_view,
            metrics_range=self.metrics_view.shown_range,
        )

    # -- Commands -----------------------------------------------------------

    def start(self) -> list[FetchRequest]:
        """Initial load for whatever is active at startup."""
        return self._ensure_loaded(self.active_view)

    def select_tab(self, tab: Tab) -> list[FetchRequest]:
        self.active_tab = tab
        return self._ensure_loaded(self.active_view)

    def next_tab(self) -> list[FetchRequest]:
        index = TAB_ORDER.index(self.active_tab)
        return self.select_tab(TAB_ORDER[(index + 1) % len(TAB_ORDER)])

    def previous_tab(self) -> list[FetchRequest]:
        index = TAB_ORDER.index(self.active_tab)
        return self.select_tab(TAB_ORDER[(index - 1) % len(TAB_ORDER)])

    def select_mode(self, mode: TimelineMode) -> list[FetchRequest]:
        """Switch the timeline mode. Ignored outside the timeline tab."""
        if self.active_tab is not Tab.TIMELINE or mode is self.timeline_mode:
            return []
        self.timeline_mode = mode
        return self._ensure_loaded(self.active_view)

    def refresh(self) -> list[FetchRequest]:
        """Fetch the active view again unless it is already loading."""
        view = self.active_view
        if view is None or view.is_loading:
            return []

        since_id = None
        mode = view.view_id.mode
        if mode is not None and mode.supports_since and view.items:
            since_id = view.cursor
        return [self._begin(view, since_id=since_id)]

    def select_metrics_range(self, days: int) -> list[FetchRequest]:
        """Switch the metrics window. Ignored outside the metrics tab."""
        if self.active_tab is not Tab.METRICS:
            return []
        if days not in METRICS_RANGES:
            logger.warning("Ignoring unsupported metrics range %s", days)
            return []
        view = self.metrics_view
        if view.is_loading:
            view.notice = "Metrics scan in progress."
            return []
        if view.range_days == days and view.items:
            return []
        # The loaded range and title only change once the new series arrives.
        view.requested_range = days
        return [self._begin(view)]

    def move_selection(self, delta: int) -> None:
        view = self.active_view
        if view is None:
            return
        view.selected_index += delta
        view.clamp_selection()

    def select_index(self, index: int) -> None:
        view = self.active_view
        if view is None:
            return
        view.selected_index = index
        view.clamp_selection()

    # -- Results ------------------------------------------------------------

    def apply_result(self, result: FeedResult) -> Outcome:
        """Apply a finished fetch to the view it was requested for."""
        view = self.views[result.view_id]

        if not result.ok:
            view.status = LoadStatus.ERROR
            view.error_message = result.error or "unknown error"
            view.notice = f"Error: {view.error_message}"
            if isinstance(view, MetricsViewState):
                view.progress_active = False
                view.requested_range = None
            return Outcome.FAILED

        view.status = LoadStatus.LOADED
        view.error_message = ""
        if result.account_id:
            self.account_id = result.account_id

        if isinstance(view, MetricsViewState):
            return self._apply_series(view, result)
        if result.since_id:
            return self._prepend(view, list(result.items))
        return self._replace(view, list(result.items))

    def apply_progress(self, reporter: ProgressReporter, scanned: Optional[int]) -> bool:
        """Record one progress tick. Returns True while the reporter is open.

        Ticks from a reporter that no longer belongs to the metrics view are
        drained but not shown.
        """
        view = self.metrics_view
        current = reporter is view.reporter
        if scanned is None:
            if current:
                view.progress_active = False
                view.reporter = None
            return False
        if current and view.is_loading:
            view.progress_active = True
            view.progress_scanned = scanned
        return True

    # -- Internals ----------------------------------------------------------

    def _ensure_loaded(self, view: Optional[ViewState]) -> list[FetchRequest]:
        if view is None or view.is_loading or view.is_cached:
            return []
        if view.status is LoadStatus.ERROR and view.items:
            # Keep showing the last good data; `r` retries.
            return []
        return [self._begin(view)]

    def _begin(self, view: ViewState, since_id: Optional[str] = None) -> FetchRequest:
        view.status = LoadStatus.LOADING
        view.notice = ""
        logger.debug("Fetching %s (since_id=%s)", view.view_id.label, since_id)

        if isinstance(view, MetricsViewState):
            reporter = ProgressReporter()
            view.reporter = reporter
            view.progress_active = True
            view.progress_scanned = 0
            return FetchRequest(view.view_id, range_days=view.shown_range, reporter=reporter)
        if view.view_id.tab is Tab.PROFILE:
            return FetchRequest(view.view_id, account_id=self.account_id)
        return FetchRequest(view.view_id, since_id=since_id)

    def _replace(self, view: ViewState, items: list[Any]) -> Outcome:
        view.set_items(items)
        view.cursor = item_id(items[0]) if items else None
        view.selected_index = 0
        if items:
            view.notice = f"Loaded {len(items)} {view.noun}."
        else:
            view.notice = f"No {view.noun} returned."
        return Outcome.REPLACED

    def _prepend(self, view: ViewState, items: list[Any]) -> Outcome:
        if not items:
            view.notice = f"No new {view.noun}."
            return Outcome.NO_NEW_ITEMS
        view.set_items(items + view.items)
        view.cursor = item_id(items[0])
        view.selected_index += len(items)
        view.clamp_selection()
        view.notice = f"Fetched {len(items)} new {view.noun}."
        return Outcome.PREPENDED

    def _apply_series(self, view: MetricsViewState, result: FeedResult) -> Outcome:
        view.range_days = result.range_days or view.shown_range
        view.title = f"Metrics ({view.range_days}d)"
        view.requested_range = None
        view.progress_active = False
        view.set_items(list(result.items))
        view.clamp_selection()
        if view.items:
            view.notice = f"Loaded {len(view.items)} {view.noun}."
        else:
            view.notice = "No metrics returned."
        return Outcome.REPLACED
