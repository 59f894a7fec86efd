"""Messages posted from fetch workers back to the dashboard's event loop."""

from __future__ import annotations

from typing import Optional

from textual.message import Message

from ..progress import ProgressReporter
from ..views import FeedResult


class FeedFetched(Message):
    """Posted when a background fetch finishes, successfully or not."""

    def __init__(self, result: FeedResult) -> None:
        super().__init__()
        self.result = result


class MetricsProgress(Message):
    """One tick from a metrics scan. ``scanned`` is None once the scan closed it."""

    def __init__(self, reporter: ProgressReporter, scanned: Optional[int]) -> None:
        super().__init__()
        self.reporter = reporter
        self.scanned = scanned
