"""Day-bucketed engagement metrics from the grouped notification history.

The notification history is unbounded and arrives newest first, one page at a
time. ``compute_series`` walks it backwards only as far as the requested
window needs, folds follow/favourite/reblog groups into per-day buckets and
returns exactly one ``DailyMetric`` per calendar day of the window, oldest
first.

Known limitation: the scan stops at the first page whose oldest record falls
before the window. If the server ever returned pages out of chronological
order, records for the boundary day on a later page would be missed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Iterable, Iterator, Optional, Protocol, Sequence

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

ACCEPTED_RANGES = (7, 30)
PAGE_LIMIT = 40

# Notification type -> DailyMetric field
COUNTED_TYPES = {
    "follow": "follows",
    "favourite": "likes",
    "reblog": "boosts",
}

# RFC 3339 with and without fractional seconds
TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")

_LONG_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class GroupedRecord(Protocol):
    type: str
    count: int
    latest_at: str
    most_recent_id: str


PageFetcher = Callable[[int, Optional[str]], Sequence[GroupedRecord]]
ProgressCallback = Callable[[int], None]


@dataclass(frozen=True)
class DailyMetric:
    day: date
    label: str
    follows: int = 0
    likes: int = 0
    boosts: int = 0

    @property
    def total(self) -> int:
        return self.follows + self.likes + self.boosts


def day_label(day: date) -> str:
    """Short label such as 'Jan 2'."""
    return f"{day:%b} {day.day}"


@dataclass(frozen=True)
class Window:
    """Contiguous, inclusive range of calendar days ending today."""

    start: date
    end: date

    @classmethod
    def ending(cls, range_days: int, now: datetime, tz: tzinfo | None = None) -> "Window":
        if range_days < 1:
            raise ValidationError(f"range must be at least 1 day, got {range_days}")
        end = floor_to_day(now, tz)
        return cls(start=end - timedelta(days=range_days - 1), end=end)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)


def floor_to_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of ``moment`` in ``tz`` (local time when tz is None).

    Naive datetimes are taken to already be wall-clock time in that zone.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp, returning None when it does not match."""
    if not value:
        return None
    value = _LONG_FRACTION_RE.sub(r"\1", value.strip())
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_day(value: str | None, tz: tzinfo | None = None) -> date | None:
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return floor_to_day(parsed, tz)


@dataclass
class _DayBucket:
    follows: int = 0
    likes: int = 0
    boosts: int = 0


class Aggregator:
    """Accumulates grouped notification counts into day buckets for one window.

    Buckets are created on first contribution; ``series`` fills the gaps with
    zeroed days. Adding the same records in any order yields the same totals.
    """

    def __init__(self, window: Window, tz: tzinfo | None = None) -> None:
        self.window = window
        self.tz = tz
        self._buckets: dict[date, _DayBucket] = {}
        self.dropped = 0

    def add(self, records: Iterable[GroupedRecord]) -> int:
        """Fold records into the buckets. Returns how many were counted."""
        counted = 0
        for record in records:
            field_name = COUNTED_TYPES.get(record.type)
            if field_name is None:
                continue
            day = parse_day(record.latest_at, self.tz)
            if day is None:
                self.dropped += 1
                continue
            if day not in self.window:
                continue
            bucket = self._buckets.get(day)
            if bucket is None:
                bucket = self._buckets[day] = _DayBucket()
            setattr(bucket, field_name, getattr(bucket, field_name) + record.count)
            counted += 1
        return counted

    def series(self) -> list[DailyMetric]:
        series = []
        for day in self.window.days():
            bucket = self._buckets.get(day) or _DayBucket()
            series.append(
                DailyMetric(
                    day=day,
                    label=day_label(day),
                    follows=bucket.follows,
                    likes=bucket.likes,
                    boosts=bucket.boosts,
                )
            )
        return series


def compute_series(
    range_days: int,
    now: datetime,
    fetch_page: PageFetcher,
    on_progress: ProgressCallback | None = None,
    tz: tzinfo | None = None,
) -> list[DailyMetric]:
    """Scan grouped notifications backwards and return the daily series.

    Args:
        range_days: 7 or 30.
        now: Reference time; the window ends on its calendar day.
        fetch_page: ``fetch_page(limit, max_id)`` returning one newest-first
            page of grouped notifications. ``max_id`` is None for the first page.
        on_progress: Called with the cumulative number of scanned records after
            every page it folds, whether or not anything on it fell inside the window.
            A page that repeats an earlier cursor ends the scan unfolded.
        tz: Zone used to assign timestamps to calendar days (local when None).

    Returns:
        Exactly ``range_days`` metrics, one per day, oldest first.

    Raises:
        ValidationError: If ``range_days`` is not an accepted range.
        Whatever ``fetch_page`` raises. Partial totals are discarded.
    """
    if range_days not in ACCEPTED_RANGES:
        raise ValidationError(f"range must be 7 or 30, got {range_days}")

    aggregator = Aggregator(Window.ending(range_days, now, tz), tz=tz)
    scanned = 0
    max_id: str | None = None
    seen_cursors: set[str] = set()

    while True:
        page = fetch_page(PAGE_LIMIT, max_id)
        cursor = page[-1].most_recent_id if page else None
        if cursor and cursor in seen_cursors:
            logger.debug("Metrics scan finished: page repeats cursor %s after %d records", cursor, scanned)
            break
        aggregator.add(page)
        scanned += len(page)
        logger.debug("Scanned page max_id=%s: %d records (%d total)", max_id, len(page), scanned)
        if on_progress is not None:
            on_progress(scanned)

        if not page:
            logger.debug("Metrics scan finished: empty page after %d records", scanned)
            break

        oldest = page[-1]
        oldest_day = parse_day(oldest.latest_at, tz)
        if oldest_day is not None and oldest_day < aggregator.window.start:
            logger.debug(
                "Metrics scan finished: reached %s before window start %s after %d records",
                oldest_day, aggregator.window.start, scanned,
            )
            break

        if not cursor:
            logger.debug("Metrics scan finished: no cursor after %d records", scanned)
            break
        seen_cursors.add(cursor)
        max_id = cursor

    if aggregator.dropped:
        logger.debug("Skipped %d records with unparseable timestamps", aggregator.dropped)
    return aggregator.series()


def format_total(series: Sequence[DailyMetric]) -> str:
    follows = sum(day.follows for day in series)
    likes = sum(day.likes for day in series)
    boosts = sum(day.boosts for day in series)
    return f"Follows {follows} · Likes {likes} · Boosts {boosts}"
