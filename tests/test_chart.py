"""Tests for the metrics text chart."""

from datetime import date

from tootboard.metrics.aggregator import DailyMetric
from tootboard.metrics.chart import (
    BAR_CHAR,
    MIN_BAR_WIDTH,
    bar_width_for,
    max_count,
    max_total,
    render_chart,
    render_legend,
    render_loading,
    render_selection,
    render_sparkline,
    render_stacked_bar,
)


def _series():
    return [
        DailyMetric(date(2025, 1, 8), "Jan 8", 0, 0, 0),
        DailyMetric(date(2025, 1, 9), "Jan 9", 0, 0, 3),
        DailyMetric(date(2025, 1, 10), "Jan 10", 1, 2, 0),
    ]


class TestScales:
    def test_max_count_and_total(self):
        assert max_count(_series()) == 3
        assert max_total(_series()) == 3

    def test_empty_series(self):
        assert max_count([]) == 0
        assert max_total([]) == 0

    def test_bar_width_has_minimum(self):
        assert bar_width_for(_series(), 5) == MIN_BAR_WIDTH


class TestStackedBar:
    def test_exact_width(self, theme):
        day = DailyMetric(date(2025, 1, 10), "Jan 10", 1, 2, 0)
        bar = render_stacked_bar(day, 3, 12, theme)
        assert bar.plain == BAR_CHAR * 12

    def test_empty_day_is_blank(self, theme):
        day = DailyMetric(date(2025, 1, 8), "Jan 8")
        assert render_stacked_bar(day, 3, 5, theme).plain == "     "

    def test_zero_width(self, theme):
        day = DailyMetric(date(2025, 1, 10), "Jan 10", 1, 0, 0)
        assert render_stacked_bar(day, 1, 0, theme).plain == ""


class TestSelection:
    def test_first_day_has_no_delta(self):
        line = render_selection(_series(), 0)
        assert line.startswith("Selected Jan 8")
        assert line.endswith("Δ n/a")

    def test_delta_against_previous_day(self):
        line = render_selection(_series(), 2)
        assert "Pct F33% L66% B0%" in line
        assert "Δ F+1 L+2 B-3" in line

    def test_out_of_range_falls_back_to_first(self):
        assert render_selection(_series(), 9).startswith("Selected Jan 8")


class TestChart:
    def test_empty(self, theme):
        assert render_chart([], 80, 0, theme).plain == "No metrics yet."

    def test_layout(self, theme):
        plain = render_chart(_series(), 80, 1, theme).plain
        lines = plain.splitlines()
        assert lines[0] == "Follows 1 · Likes 2 · Boosts 3"
        assert lines[1].startswith("Follows ")
        assert lines[2].startswith("Trend ")
        assert lines[3].startswith("Selected Jan 9")
        assert lines[-3].startswith("  Jan 8")
        assert lines[-2].startswith("> Jan 9")
        assert lines[-1].startswith("  Jan 10")
        assert lines[-1].endswith("F1 L2 B0")

    def test_legend_names_categories(self, theme):
        assert render_legend(theme).plain == "Follows ##  Likes ##  Boosts ##"

    def test_sparkline(self):
        assert render_sparkline(_series(), 80) == "Trend  ##"
        assert render_sparkline([], 80) == "Trend -"


class TestLoading:
    def test_scanned_count(self):
        assert render_loading(30, 120, True) == "Loading metrics (30d)...\nScanned 120 groups..."

    def test_before_first_page(self):
        assert render_loading(7, 0, True, "⠋") == "⠋ Loading metrics (7d)...\nScanning groups..."

    def test_inactive_progress(self):
        assert render_loading(7, 5, False) == "Loading metrics (7d)..."
