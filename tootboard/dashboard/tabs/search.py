"""Search tab — key reference. Searching itself is not wired to the API."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from .base import TabBase

HELP_TEXT = """\
Keys

  t  Timeline        h  Home        l  Local
  s  Search          f  Federated   g  Trending
  p  Profile
  m  Metrics         7  Last 7 days
  n  Notifications   3  Last 30 days

  tab / shift+tab    next / previous tab
  j / k              move selection
  r                  refresh the current view
  q                  quit

Search is not available yet.
"""


class SearchPane(TabBase):
    def compose(self) -> ComposeResult:
        with VerticalScroll():
            yield Static(HELP_TEXT, classes="help-text")
