"""Status badge widget for displaying the active view's load status."""

from textual.widgets import Static

from ...views import LoadStatus


SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


class StatusBadge(Static):
    """A colored inline badge showing whether the active view is loading.

    Possible statuses and their badges:
    - LOADING → "⠋ LOAD" (animated spinner, green)
    - LOADED  → "OK"     (dim)
    - ERROR   → "ERR"    (red)
    - IDLE    → "IDLE"   (dim)
    """

    DEFAULT_CSS = """
    StatusBadge { width: auto; padding: 0 1; }
    StatusBadge.badge--loading { color: $success; }
    StatusBadge.badge--error { color: $error; text-style: bold; }
    StatusBadge.badge--loaded, StatusBadge.badge--idle { color: $text-muted; }
    """

    def __init__(self, status: LoadStatus = LoadStatus.IDLE, **kwargs: object) -> None:
        self._status = status
        self._spinner_index = 0
        text, css_class = _badge_for(status)
        super().__init__(text, **kwargs)
        self.add_class(css_class)

    @property
    def status(self) -> LoadStatus:
        return self._status

    def on_mount(self) -> None:
        self.set_interval(0.1, self._tick_spinner)

    def set_status(self, status: LoadStatus) -> None:
        if status is self._status:
            return
        _, old_class = _badge_for(self._status)
        self.remove_class(old_class)
        self._status = status
        text, css_class = _badge_for(status)
        self.add_class(css_class)
        self.update(text)

    def _tick_spinner(self) -> None:
        if self._status is not LoadStatus.LOADING:
            return
        self._spinner_index = (self._spinner_index + 1) % len(SPINNER_FRAMES)
        frame = SPINNER_FRAMES[self._spinner_index]
        self.update(f"{frame} LOAD")


def _badge_for(status: LoadStatus) -> tuple[str, str]:
    """Return (badge_text, css_class) for a given load status."""
    if status is LoadStatus.LOADING:
        frame = SPINNER_FRAMES[0]
        return f"{frame} LOAD", "badge--loading"
    elif status is LoadStatus.ERROR:
        return "ERR", "badge--error"
    elif status is LoadStatus.LOADED:
        return "OK", "badge--loaded"
    else:
        return "IDLE", "badge--idle"
