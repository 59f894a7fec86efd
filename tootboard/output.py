"""Plain-text printers for the one-shot commands."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

from mastodon_sdk import GroupedNotification, Status

from .metrics.aggregator import DailyMetric, format_total
from .render import format_account, notification_accounts_label, notification_type_label
from .text import strip_html, wrap_text

WRAP_WIDTH = 80


def print_statuses(statuses: Sequence[Status], out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if not statuses:
        print("No statuses returned.", file=out)
        return

    for status in statuses:
        shown = status.display
        print("----", file=out)
        print(f"Author: {format_account(shown.account)}", file=out)
        print(f"Time:   {shown.created_at}", file=out)
        if status.reblog is not None:
            print(f"Boost:  @{status.account.acct}", file=out)
        print("Text:", file=out)
        print(wrap_text(strip_html(shown.content), WRAP_WIDTH), file=out)
        print(file=out)


def print_notifications(groups: Sequence[GroupedNotification], out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if not groups:
        print("No notifications returned.", file=out)
        return

    for group in groups:
        print("----", file=out)
        print(f"Type:   {notification_type_label(group.type)} ({group.count})", file=out)
        print(f"From:   {notification_accounts_label(group.accounts)}", file=out)
        print(f"Time:   {group.latest_at or 'Unknown'}", file=out)
        if group.status is not None:
            print("Text:", file=out)
            print(wrap_text(strip_html(group.status.content), WRAP_WIDTH), file=out)
        print(file=out)


def print_daily_metrics(series: Sequence[DailyMetric], out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if not series:
        print("No metrics returned.", file=out)
        return

    for day in series:
        print(f"{day.label:<6}  F:{day.follows}  L:{day.likes}  B:{day.boosts}", file=out)
    print(format_total(series), file=out)
