"""Text chart for the metrics tab.

Layout, top to bottom: totals line, legend, trend sparkline, a summary of the
selected day, then one stacked bar per day scaled against the busiest day.
"""

from __future__ import annotations

from typing import Sequence

from rich.text import Text

from ..config import Theme
from .aggregator import DailyMetric, format_total
from .bars import allocate

BAR_CHAR = "#"
SPARK_RAMP = " .:-=+*#"
SPARK_LABEL = "Trend "
LABEL_WIDTH = 6
MIN_BAR_WIDTH = 10


def max_count(series: Sequence[DailyMetric]) -> int:
    """Largest single-category count on any day."""
    return max((max(d.follows, d.likes, d.boosts) for d in series), default=0)


def max_total(series: Sequence[DailyMetric]) -> int:
    return max((d.total for d in series), default=0)


def render_legend(theme: Theme) -> Text:
    legend = Text()
    legend.append(f"Follows {BAR_CHAR * 2}", style=theme.follows)
    legend.append("  ")
    legend.append(f"Likes {BAR_CHAR * 2}", style=theme.likes)
    legend.append("  ")
    legend.append(f"Boosts {BAR_CHAR * 2}", style=theme.boosts)
    return legend


def render_sparkline(series: Sequence[DailyMetric], width: int) -> str:
    """One ramp character per day, sampled down when the series is too wide."""
    if not series:
        return SPARK_LABEL + "-"
    max_width = max(4, width - len(SPARK_LABEL) - 1)
    points = list(series)
    if len(points) > max_width:
        step = -(-len(points) // max_width)
        points = points[::step]

    peak = max_total(points) or 1
    top = len(SPARK_RAMP) - 1
    chars = []
    for day in points:
        index = min(top, max(0, (day.total * top) // peak))
        chars.append(SPARK_RAMP[index])
    return SPARK_LABEL + "".join(chars)


def _percent(part: int, total: int) -> int:
    return (part * 100) // total if total else 0


def render_selection(series: Sequence[DailyMetric], selected: int) -> str:
    """Counts, shares and day-over-day change for the selected day."""
    if not series:
        return ""
    if not 0 <= selected < len(series):
        selected = 0
    day = series[selected]
    line = (
        f"Selected {day.label}  F{day.follows} L{day.likes} B{day.boosts}"
        f"  Pct F{_percent(day.follows, day.total)}% L{_percent(day.likes, day.total)}%"
        f" B{_percent(day.boosts, day.total)}%"
    )
    if selected == 0:
        return line + "  Δ n/a"
    prev = series[selected - 1]
    return (
        f"{line}  Δ F{day.follows - prev.follows:+d} L{day.likes - prev.likes:+d}"
        f" B{day.boosts - prev.boosts:+d}"
    )


def render_stacked_bar(day: DailyMetric, scale: int, width: int, theme: Theme) -> Text:
    """A bar of exactly ``width`` cells; empty days render as blanks."""
    bar = Text()
    if width <= 0:
        return bar
    if day.total == 0:
        bar.append(" " * width)
        return bar

    follows, likes, boosts = allocate((day.follows, day.likes, day.boosts), max(1, scale), width)
    bar.append(BAR_CHAR * follows, style=theme.follows)
    bar.append(BAR_CHAR * likes, style=theme.likes)
    bar.append(BAR_CHAR * boosts, style=theme.boosts)
    return bar


def bar_width_for(series: Sequence[DailyMetric], width: int) -> int:
    """Cells left for bars after the label and the widest counts column."""
    peak = max_count(series)
    counts_template = f"F{peak} L{peak} B{peak}"
    return max(MIN_BAR_WIDTH, width - (LABEL_WIDTH + 1 + len(counts_template) + 3))


def render_chart(series: Sequence[DailyMetric], width: int, selected: int, theme: Theme) -> Text:
    if not series:
        return Text("No metrics yet.")
    if not 0 <= selected < len(series):
        selected = 0

    chart = Text()
    chart.append(format_total(series) + "\n")
    chart.append_text(render_legend(theme))
    chart.append("\n" + render_sparkline(series, width) + "\n")
    chart.append(render_selection(series, selected) + "\n\n")

    bar_width = bar_width_for(series, width)
    scale = max_total(series) or 1
    for i, day in enumerate(series):
        row = Text()
        row.append(f"{day.label:<{LABEL_WIDTH}} ")
        row.append_text(render_stacked_bar(day, scale, bar_width, theme))
        row.append(f" F{day.follows} L{day.likes} B{day.boosts}")
        if i == selected:
            chart.append("> ", style=theme.selected)
            row.stylize(theme.selected, 0, LABEL_WIDTH)
        else:
            chart.append("  ")
        chart.append_text(row)
        if i < len(series) - 1:
            chart.append("\n")
    return chart


def render_loading(range_days: int, scanned: int, progress_active: bool, spinner: str = "") -> str:
    lines = [f"{spinner} Loading metrics ({range_days}d)...".strip()]
    if progress_active:
        if scanned > 0:
            lines.append(f"Scanned {scanned} groups...")
        else:
            lines.append("Scanning groups...")
    return "\n".join(lines)
