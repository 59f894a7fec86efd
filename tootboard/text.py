"""Shared text helpers: HTML stripping, wrapping and relative ages."""

from __future__ import annotations

import html
import re
import textwrap
from datetime import datetime, timezone

_BREAK_RE = re.compile(r"<br\s*/?>|</p>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(value: str | None) -> str:
    """Drop markup from post content and unescape entities."""
    if not value:
        return ""
    text = _BREAK_RE.sub(" ", value)
    text = _TAG_RE.sub("", text)
    return html.unescape(text).strip()


def wrap_text(text: str, width: int) -> str:
    """Greedy word wrap. Whitespace runs collapse to single spaces."""
    if width <= 0:
        return text
    words = text.split()
    if not words:
        return ""
    return "\n".join(
        textwrap.wrap(" ".join(words), width=width, break_long_words=False, break_on_hyphens=False)
    )


def truncate_lines(text: str, max_lines: int) -> str:
    """Keep the first ``max_lines`` lines, marking the cut with an ellipsis."""
    lines = text.splitlines()
    if len(lines) <= max_lines:
        return text
    kept = lines[:max_lines]
    kept[-1] = kept[-1].rstrip() + "…"
    return "\n".join(kept)


def _elapsed(iso_str: str | None) -> float | None:
    """Seconds since an ISO timestamp, or None if it does not parse.

    Naive timestamps are taken to be UTC.
    """
    if not iso_str:
        return None
    try:
        dt = datetime.fromisoformat(str(iso_str).replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (datetime.now(timezone.utc) - dt).total_seconds()


def format_age(iso_str: str | None) -> str:
    """Format an ISO timestamp as a compact age like '2h', '15m'."""
    secs = _elapsed(iso_str)
    if secs is None:
        return ""
    if secs < 0:
        return "now"
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if secs >= size:
            return f"{int(secs // size)}{unit}"
    return f"{int(secs)}s"


def time_ago(iso_str: str | None) -> str | None:
    """Relative age for detail views, e.g. '5m ago' or '1d 2h ago'."""
    secs = _elapsed(iso_str)
    if secs is None:
        return None
    if secs < 0:
        return "just now"
    hours, mins = divmod(int(secs // 60), 60)
    if not hours:
        return f"{mins}m ago"
    days, hours = divmod(hours, 24)
    if not days:
        return f"{hours}h {mins}m ago"
    return f"{days}d {hours}h ago"
