"""Shared test fixtures for tootboard tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from mastodon_sdk import Account, GroupedNotification, Status
from tootboard.config import Theme


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config lookups at a temp directory and drop env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("TOOTBOARD_CONFIG", raising=False)
    monkeypatch.delenv("TOOTBOARD_INSTANCE", raising=False)
    monkeypatch.delenv("TOOTBOARD_ACCESS_TOKEN", raising=False)
    yield tmp_path / "xdg" / "tootboard"


@pytest.fixture
def theme():
    return Theme()


@pytest.fixture
def account():
    return Account(id="1", acct="alice@example.social", username="alice", display_name="Alice")


@pytest.fixture
def make_status(account):
    """Factory for Status records with sequential ids."""

    def _make(status_id="100", content="<p>Hello world</p>", reblog=None, author=None):
        return Status(
            id=str(status_id),
            created_at="2025-01-10T12:00:00.000Z",
            content=content,
            account=author or account,
            reblog=reblog,
        )

    return _make


@pytest.fixture
def make_group(account):
    """Factory for GroupedNotification records."""

    def _make(type="favourite", count=1, latest_at="2025-01-10T12:00:00.000Z", most_recent_id="500",
              accounts=None, status=None):
        return GroupedNotification(
            group_key=f"{type}-{most_recent_id}",
            type=type,
            count=count,
            latest_at=latest_at,
            most_recent_id=str(most_recent_id),
            accounts=tuple(accounts) if accounts is not None else (account,),
            status=status,
        )

    return _make


@pytest.fixture
def now_utc():
    """Fixed reference time: 2025-01-10 12:00 UTC."""
    return datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def iso_days_ago(now_utc):
    """Timestamp string ``days`` before the reference time, in API format."""

    def _iso(days, hours=0):
        moment = now_utc - timedelta(days=days, hours=hours)
        return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")

    return _iso


@pytest.fixture
def mock_client():
    """A MagicMock standing in for MastodonClient."""
    client = MagicMock()
    client.verify_credentials.return_value = Account(id="42", acct="me")
    client.home_timeline_page.return_value = []
    client.public_timeline_page.return_value = []
    client.trending_posts.return_value = []
    client.account_posts.return_value = []
    client.grouped_notifications.return_value = []
    client.grouped_notifications_page.return_value = []
    return client
