"""Rendering of feed rows, detail panes and header bars.

Everything here is a pure function of its arguments. Colors come from the
``Theme`` passed in by the caller.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.text import Text

from mastodon_sdk import Account, GroupedNotification, Status

from .config import Theme
from .metrics.aggregator import DailyMetric
from .text import format_age, strip_html, time_ago, truncate_lines, wrap_text
from .views import TimelineMode

SNIPPET_LINES = 2
NO_TEXT = "(no text)"

NOTIFICATION_LABELS = {
    "mention": "Mention",
    "status": "Status",
    "reblog": "Boost",
    "favourite": "Favorite",
    "follow": "Follow",
    "follow_request": "Follow request",
    "poll": "Poll",
    "update": "Update",
    "admin.sign_up": "Sign up",
    "admin.report": "Report",
}


def format_account(account: Account) -> str:
    name = strip_html(account.display_name).strip()
    if name and name != account.acct:
        return f"{name} (@{account.acct})"
    return f"@{account.acct}"


def notification_type_label(value: str) -> str:
    return NOTIFICATION_LABELS.get(value, value)


def notification_accounts_label(accounts: Sequence[Account]) -> str:
    if not accounts:
        return "Unknown"
    first = format_account(accounts[0])
    if len(accounts) == 1:
        return first
    return f"{first} +{len(accounts) - 1}"


def _snippet(content: str, width: int) -> str:
    snippet = wrap_text(strip_html(content), max(20, width - 6))
    snippet = truncate_lines(snippet, SNIPPET_LINES)
    return snippet or NO_TEXT


def _when(timestamp: str) -> str:
    ago = time_ago(timestamp)
    return f"{timestamp} ({ago})" if ago else timestamp


# ---------------------------------------------------------------------------
# List rows
# ---------------------------------------------------------------------------


def status_row(status: Status, width: int, theme: Theme) -> Text:
    shown = status.display
    row = Text()
    row.append(format_account(shown.account), style=theme.author)
    if status.reblog is not None:
        row.append(f" · boosted by @{status.account.acct}", style=theme.muted)
    row.append(f" · {format_age(shown.created_at) or shown.created_at}", style=theme.time)
    row.append("\n" + _snippet(shown.content, width))
    return row


def notification_row(group: GroupedNotification, width: int, theme: Theme) -> Text:
    row = Text()
    row.append(f"{notification_type_label(group.type)} ({group.count})", style=theme.author)
    row.append(f" · {notification_accounts_label(group.accounts)}")
    row.append(f" · {format_age(group.latest_at) or 'Unknown'}", style=theme.time)
    content = group.status.content if group.status is not None else ""
    row.append("\n" + _snippet(content, width))
    return row


def metric_row(day: DailyMetric, theme: Theme) -> Text:
    row = Text(day.label, style=theme.author)
    row.append(f"\nF {day.follows} · L {day.likes} · B {day.boosts}")
    return row


def placeholder_row(title: str, snippet: str, theme: Theme) -> Text:
    row = Text(title, style=theme.muted)
    row.append("\n" + snippet)
    return row


# ---------------------------------------------------------------------------
# Detail panes
# ---------------------------------------------------------------------------


def status_detail(status: Status, width: int, theme: Theme) -> Text:
    shown = status.display
    detail = Text("-" * max(0, width) + "\n")
    detail.append("Author:", style=theme.author)
    detail.append(f" {format_account(shown.account)}\n")
    detail.append("Time:", style=theme.time)
    detail.append(f"   {_when(shown.created_at)}\n")
    if status.reblog is not None:
        detail.append("Boost:", style=theme.muted)
        detail.append(f"  @{status.account.acct}\n")
    detail.append(
        f"Replies {shown.replies_count} · Boosts {shown.reblogs_count}"
        f" · Favourites {shown.favourites_count}\n",
        style=theme.muted,
    )
    detail.append("Text:\n")
    detail.append(wrap_text(strip_html(shown.content), max(20, width - 2)) or NO_TEXT)
    if shown.url:
        detail.append(f"\n\n{shown.url}", style=theme.muted)
    return detail


def notification_detail(group: GroupedNotification, width: int, theme: Theme) -> Text:
    detail = Text("-" * max(0, width) + "\n")
    detail.append("Type:", style=theme.author)
    detail.append(f" {notification_type_label(group.type)}\n")
    detail.append("From:", style=theme.author)
    detail.append(f" {notification_accounts_label(group.accounts)}\n")
    detail.append("Time:", style=theme.time)
    detail.append(f"   {_when(group.latest_at) if group.latest_at else 'Unknown'}\n")
    detail.append("Count:", style=theme.muted)
    detail.append(f"  {group.count}\n")
    if len(group.accounts) > 1:
        for account in group.accounts[1:]:
            detail.append(f"        {format_account(account)}\n", style=theme.muted)
    if group.status is not None:
        detail.append("Text:\n")
        detail.append(wrap_text(strip_html(group.status.content), max(20, width - 2)) or NO_TEXT)
    return detail


# ---------------------------------------------------------------------------
# Header bars
# ---------------------------------------------------------------------------


def _labels(parts: Iterable[tuple[str, bool]], theme: Theme) -> Text:
    bar = Text()
    for label, active in parts:
        bar.append(f" {label} ", style=theme.active_tab if active else theme.tab)
        bar.append(" ")
    bar.rstrip()
    return bar


def mode_bar(active: TimelineMode, theme: Theme) -> Text:
    return _labels(((mode.label, mode is active) for mode in TimelineMode), theme)


def range_bar(range_days: int, theme: Theme, ranges: Sequence[int] = (7, 30)) -> Text:
    return _labels(((f"{days}d", days == range_days) for days in ranges), theme)
