"""Run fetch requests against the API client on a background thread.

``run_fetch`` is the task boundary: whatever happens, it returns a
``FeedResult`` tagged with the requesting view and never raises.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from mastodon_sdk import MastodonError

from .config import PAGE_LIMIT
from .metrics.aggregator import compute_series
from .views import FeedResult, FetchRequest, Tab, TimelineMode

logger = logging.getLogger(__name__)


def fetch_timeline(client: Any, mode: TimelineMode, since_id: str | None) -> list:
    if mode is TimelineMode.HOME:
        return client.home_timeline_page(PAGE_LIMIT, since_id=since_id)
    if mode is TimelineMode.LOCAL:
        return client.public_timeline_page(PAGE_LIMIT, local_only=True, since_id=since_id)
    if mode is TimelineMode.FEDERATED:
        return client.public_timeline_page(PAGE_LIMIT, local_only=False, since_id=since_id)
    if mode is TimelineMode.TRENDING:
        return client.trending_posts(PAGE_LIMIT)
    raise ValueError(f"unknown timeline mode: {mode}")


def _run(client: Any, request: FetchRequest, now: datetime | None) -> FeedResult:
    view_id = request.view_id
    tab = view_id.tab

    if tab is Tab.TIMELINE:
        assert view_id.mode is not None
        statuses = fetch_timeline(client, view_id.mode, request.since_id)
        return FeedResult(view_id, items=tuple(statuses), since_id=request.since_id)

    if tab is Tab.PROFILE:
        account_id = request.account_id
        if not account_id:
            account_id = client.verify_credentials().id
        statuses = client.account_posts(
            account_id, PAGE_LIMIT, include_boosts=False, include_replies=False
        )
        return FeedResult(view_id, items=tuple(statuses), account_id=account_id)

    if tab is Tab.NOTIFICATIONS:
        groups = client.grouped_notifications(PAGE_LIMIT)
        return FeedResult(view_id, items=tuple(groups))

    if tab is Tab.METRICS:
        assert request.range_days is not None
        reporter = request.reporter
        try:
            series = compute_series(
                request.range_days,
                now or datetime.now().astimezone(),
                lambda limit, max_id: client.grouped_notifications_page(limit, max_id=max_id),
                on_progress=reporter.send if reporter is not None else None,
            )
        finally:
            if reporter is not None:
                reporter.close()
        return FeedResult(view_id, items=tuple(series), range_days=request.range_days)

    raise ValueError(f"{view_id.label} has no feed")


def run_fetch(client: Any, request: FetchRequest, now: datetime | None = None) -> FeedResult:
    """Execute one request, converting every failure into an error result."""
    try:
        return _run(client, request, now)
    except MastodonError as e:
        logger.warning("Fetch for %s failed: %s", request.view_id.label, e)
        return FeedResult(request.view_id, range_days=request.range_days, error=str(e))
    except Exception as e:
        logger.exception("Unexpected error fetching %s", request.view_id.label)
        return FeedResult(request.view_id, range_days=request.range_days, error=str(e) or type(e).__name__)
