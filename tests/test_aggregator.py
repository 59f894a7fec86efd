"""Tests for the day-bucketed metrics aggregator and the pagination scan."""

from datetime import date, datetime, timedelta, timezone

import pytest

from mastodon_sdk import MastodonNetworkError
from tootboard.exceptions import ValidationError
from tootboard.metrics.aggregator import (
    PAGE_LIMIT,
    Aggregator,
    DailyMetric,
    Window,
    compute_series,
    day_label,
    format_total,
    parse_day,
    parse_timestamp,
)

UTC = timezone.utc


class FakePages:
    """Serves a fixed list of pages and records the cursors it was asked for."""

    def __init__(self, pages, error_at=None):
        self.pages = list(pages)
        self.error_at = error_at
        self.calls = []

    def __call__(self, limit, max_id):
        self.calls.append((limit, max_id))
        index = len(self.calls) - 1
        if self.error_at is not None and index == self.error_at:
            raise MastodonNetworkError("connection reset")
        if index < len(self.pages):
            return self.pages[index]
        return []


def _by_day(series):
    return {d.day: (d.follows, d.likes, d.boosts) for d in series}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseTimestamp:
    def test_fractional_seconds(self):
        parsed = parse_timestamp("2025-01-10T12:30:00.123Z")
        assert parsed == datetime(2025, 1, 10, 12, 30, 0, 123000, tzinfo=UTC)

    def test_without_fraction(self):
        parsed = parse_timestamp("2025-01-10T12:30:00Z")
        assert parsed == datetime(2025, 1, 10, 12, 30, tzinfo=UTC)

    def test_long_fraction_is_truncated(self):
        parsed = parse_timestamp("2025-01-10T12:30:00.123456789Z")
        assert parsed.microsecond == 123456

    def test_offset(self):
        parsed = parse_timestamp("2025-01-10T12:30:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2025-01-10"])
    def test_unparseable_returns_none(self, value):
        assert parse_timestamp(value) is None

    def test_parse_day_uses_zone(self):
        late_utc = "2025-01-10T02:00:00.000Z"
        assert parse_day(late_utc, UTC) == date(2025, 1, 10)
        assert parse_day(late_utc, timezone(timedelta(hours=-5))) == date(2025, 1, 9)


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------


class TestWindow:
    def test_ending_today(self, now_utc):
        window = Window.ending(7, now_utc, UTC)
        assert window.end == date(2025, 1, 10)
        assert window.start == date(2025, 1, 4)
        assert len(window) == 7

    def test_boundaries_inclusive(self, now_utc):
        window = Window.ending(3, now_utc, UTC)
        assert date(2025, 1, 8) in window
        assert date(2025, 1, 10) in window
        assert date(2025, 1, 7) not in window
        assert date(2025, 1, 11) not in window

    def test_days_are_consecutive(self, now_utc):
        days = list(Window.ending(30, now_utc, UTC).days())
        assert len(days) == 30
        assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))

    def test_rejects_empty_range(self, now_utc):
        with pytest.raises(ValidationError):
            Window.ending(0, now_utc, UTC)


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class TestAggregator:
    def test_concrete_three_day_scenario(self, now_utc, make_group):
        records = [
            make_group("follow", 1, "2025-01-10T09:00:00.000Z", "5"),
            make_group("favourite", 2, "2025-01-10T08:00:00.000Z", "4"),
            make_group("reblog", 3, "2025-01-09T08:00:00.000Z", "3"),
            make_group("mention", 5, "2025-01-08T08:00:00.000Z", "2"),
            make_group("follow", 7, "2024-12-31T08:00:00.000Z", "1"),
        ]
        aggregator = Aggregator(Window.ending(3, now_utc, UTC), tz=UTC)
        aggregator.add(records)

        assert _by_day(aggregator.series()) == {
            date(2025, 1, 8): (0, 0, 0),
            date(2025, 1, 9): (0, 0, 3),
            date(2025, 1, 10): (1, 2, 0),
        }

    def test_boundary_inclusion(self, now_utc, make_group):
        aggregator = Aggregator(Window.ending(3, now_utc, UTC), tz=UTC)
        counted = aggregator.add([
            make_group("follow", 1, "2025-01-08T00:00:00.000Z", "2"),
            make_group("follow", 1, "2025-01-07T23:59:59.000Z", "1"),
        ])
        assert counted == 1
        assert _by_day(aggregator.series())[date(2025, 1, 8)] == (1, 0, 0)

    def test_order_independent(self, now_utc, make_group, iso_days_ago):
        records = [
            make_group("follow", 2, iso_days_ago(0), "9"),
            make_group("favourite", 4, iso_days_ago(1), "8"),
            make_group("reblog", 1, iso_days_ago(1), "7"),
            make_group("favourite", 3, iso_days_ago(5), "6"),
            make_group("follow", 1, iso_days_ago(6), "5"),
        ]
        forward = Aggregator(Window.ending(7, now_utc, UTC), tz=UTC)
        forward.add(records[:2])
        forward.add(records[2:])
        backward = Aggregator(Window.ending(7, now_utc, UTC), tz=UTC)
        backward.add(reversed(records))
        assert forward.series() == backward.series()

    def test_unparseable_records_dropped(self, now_utc, make_group):
        aggregator = Aggregator(Window.ending(7, now_utc, UTC), tz=UTC)
        counted = aggregator.add([
            make_group("follow", 1, "not a time", "2"),
            make_group("follow", 1, "2025-01-10T01:00:00Z", "1"),
        ])
        assert counted == 1
        assert aggregator.dropped == 1

    def test_series_labels(self, now_utc):
        series = Aggregator(Window.ending(7, now_utc, UTC), tz=UTC).series()
        assert [d.label for d in series][-1] == "Jan 10"
        assert all(d.total == 0 for d in series)


# ---------------------------------------------------------------------------
# compute_series
# ---------------------------------------------------------------------------


class TestComputeSeries:
    @pytest.mark.parametrize("range_days", [7, 30])
    def test_shape(self, range_days, now_utc, make_group, iso_days_ago):
        pages = FakePages([[make_group("favourite", 1, iso_days_ago(0), "10")]])
        series = compute_series(range_days, now_utc, pages, tz=UTC)

        assert len(series) == range_days
        assert series[-1].day == date(2025, 1, 10)
        assert all(b.day - a.day == timedelta(days=1) for a, b in zip(series, series[1:]))

    def test_rejects_unsupported_range(self, now_utc):
        pages = FakePages([])
        with pytest.raises(ValidationError):
            compute_series(3, now_utc, pages, tz=UTC)
        assert pages.calls == []

    def test_follows_cursor_until_empty_page(self, now_utc, make_group, iso_days_ago):
        pages = FakePages([
            [make_group("follow", 1, iso_days_ago(0), "30"), make_group("follow", 1, iso_days_ago(1), "29")],
            [make_group("reblog", 2, iso_days_ago(2), "28")],
        ])
        series = compute_series(7, now_utc, pages, tz=UTC)

        assert pages.calls == [(PAGE_LIMIT, None), (PAGE_LIMIT, "29"), (PAGE_LIMIT, "28")]
        assert sum(d.follows for d in series) == 2
        assert sum(d.boosts for d in series) == 2

    def test_stops_once_page_reaches_before_window(self, now_utc, make_group, iso_days_ago):
        pages = FakePages([
            [make_group("follow", 1, iso_days_ago(0), "30"), make_group("follow", 5, iso_days_ago(9), "20")],
            [make_group("follow", 1, iso_days_ago(10), "10")],
        ])
        series = compute_series(7, now_utc, pages, tz=UTC)

        assert len(pages.calls) == 1
        assert sum(d.follows for d in series) == 1

    def test_stops_on_missing_cursor(self, now_utc, make_group, iso_days_ago):
        pages = FakePages([[make_group("follow", 1, iso_days_ago(0), "")]])
        compute_series(7, now_utc, pages, tz=UTC)
        assert len(pages.calls) == 1

    def test_stops_on_repeated_cursor(self, now_utc, make_group, iso_days_ago):
        page = [make_group("follow", 3, iso_days_ago(0), "30")]
        pages = FakePages([page, page, page])
        progress = []
        series = compute_series(7, now_utc, pages, on_progress=progress.append, tz=UTC)
        assert len(pages.calls) == 2
        assert sum(day.follows for day in series) == 3
        assert progress == [1]

    def test_progress_after_every_page(self, now_utc, make_group, iso_days_ago):
        pages = FakePages([
            [make_group("follow", 1, iso_days_ago(0), "30"), make_group("favourite", 1, iso_days_ago(0), "29")],
            [make_group("follow", 1, iso_days_ago(1), "28")],
        ])
        ticks = []
        compute_series(7, now_utc, pages, on_progress=ticks.append, tz=UTC)
        assert ticks == [2, 3, 3]

    def test_fetch_error_propagates(self, now_utc, make_group, iso_days_ago):
        pages = FakePages([[make_group("follow", 1, iso_days_ago(0), "30")]], error_at=1)
        with pytest.raises(MastodonNetworkError):
            compute_series(7, now_utc, pages, tz=UTC)


class TestFormatting:
    def test_day_label(self):
        assert day_label(date(2025, 1, 2)) == "Jan 2"

    def test_format_total(self):
        series = [
            DailyMetric(date(2025, 1, 9), "Jan 9", 1, 2, 3),
            DailyMetric(date(2025, 1, 10), "Jan 10", 4, 5, 6),
        ]
        assert format_total(series) == "Follows 5 · Likes 7 · Boosts 9"
