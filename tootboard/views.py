"""View identities, per-feed view state and the messages exchanged with fetch workers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .progress import ProgressReporter


class Tab(Enum):
    """Top-level tabs, in display order."""

    TIMELINE = "timeline"
    SEARCH = "search"
    PROFILE = "profile"
    METRICS = "metrics"
    NOTIFICATIONS = "notifications"

    @property
    def label(self) -> str:
        return self.value.title()


TAB_ORDER: list[Tab] = list(Tab)


class TimelineMode(Enum):
    HOME = "home"
    LOCAL = "local"
    FEDERATED = "federated"
    TRENDING = "trending"

    @property
    def label(self) -> str:
        return self.value.title()

    @property
    def supports_since(self) -> bool:
        """Whether the endpoint can return only statuses newer than a cursor."""
        return self is not TimelineMode.TRENDING


class LoadStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class Outcome(Enum):
    """What applying a fetch result did to its view."""

    REPLACED = "replaced"
    PREPENDED = "prepended"
    NO_NEW_ITEMS = "no_new_items"
    FAILED = "failed"


@dataclass(frozen=True)
class ViewId:
    """Identity of one feed. Timeline views are distinguished by mode."""

    tab: Tab
    mode: Optional[TimelineMode] = None

    @classmethod
    def timeline(cls, mode: TimelineMode) -> "ViewId":
        return cls(Tab.TIMELINE, mode)

    @property
    def label(self) -> str:
        if self.mode is not None:
            return f"{self.tab.label}/{self.mode.label}"
        return self.tab.label


TIMELINE_TITLES = {
    TimelineMode.HOME: "Home timeline",
    TimelineMode.LOCAL: "Local timeline",
    TimelineMode.FEDERATED: "Federated timeline",
    TimelineMode.TRENDING: "Trending",
}


@dataclass
class ViewState:
    """Items, pagination cursor and load status for one feed.

    Only the controller writes to a ViewState, and only on the UI thread.
    ``revision`` increases whenever ``items`` changes so renderers can skip
    rebuilding unchanged lists.
    """

    view_id: ViewId
    title: str
    noun: str = "statuses"
    items: list[Any] = field(default_factory=list)
    cursor: Optional[str] = None
    status: LoadStatus = LoadStatus.IDLE
    error_message: str = ""
    selected_index: int = 0
    notice: str = ""
    revision: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING

    @property
    def is_cached(self) -> bool:
        """Loaded with something to show; visiting again needs no fetch."""
        return self.status is LoadStatus.LOADED and bool(self.items)

    @property
    def selected_item(self) -> Any:
        if not self.items:
            return None
        return self.items[min(max(self.selected_index, 0), len(self.items) - 1)]

    def set_items(self, items: list[Any]) -> None:
        self.items = items
        self.revision += 1

    def clamp_selection(self) -> None:
        if not self.items:
            self.selected_index = 0
        else:
            self.selected_index = min(max(self.selected_index, 0), len(self.items) - 1)


@dataclass
class MetricsViewState(ViewState):
    """The metrics feed: a day series plus the progress of the running scan."""

    noun: str = "days"
    range_days: int = 7
    requested_range: Optional[int] = None
    progress_active: bool = False
    progress_scanned: int = 0
    reporter: Optional[ProgressReporter] = None

    @property
    def shown_range(self) -> int:
        """Range the scan in flight is for, else the range of the loaded series."""
        return self.requested_range or self.range_days


@dataclass(frozen=True)
class FetchRequest:
    """Everything a background fetch needs, copied out of the view state."""

    view_id: ViewId
    since_id: Optional[str] = None
    account_id: Optional[str] = None
    range_days: Optional[int] = None
    reporter: Optional[ProgressReporter] = None


@dataclass(frozen=True)
class FeedResult:
    """Outcome of a background fetch, tagged with the view it belongs to."""

    view_id: ViewId
    items: tuple[Any, ...] = ()
    since_id: Optional[str] = None
    account_id: Optional[str] = None
    range_days: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Frame:
    """What the dashboard needs to draw the current screen."""

    tab: Tab
    mode: TimelineMode
    view: Optional[ViewState]
    metrics_range: int
