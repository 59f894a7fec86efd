"""Tests for the Mastodon API client, with the HTTP session mocked out."""

from unittest.mock import MagicMock

import pytest
import requests

from mastodon_sdk import (
    MastodonAPIError,
    MastodonAuthenticationError,
    MastodonClient,
    MastodonNetworkError,
    MastodonNotFoundError,
)


def _response(status_code=200, body=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def client():
    client = MastodonClient("mastodon.example", access_token="secret", timeout=5)
    client.session = MagicMock()
    return client


def _status(status_id, **extra):
    data = {
        "id": status_id,
        "created_at": "2025-01-10T12:00:00.000Z",
        "content": "<p>hi</p>",
        "account": {"id": "1", "acct": "alice", "display_name": "Alice"},
    }
    data.update(extra)
    return data


class TestConstruction:
    def test_adds_scheme(self):
        client = MastodonClient("mastodon.example/")
        assert client.base_url == "https://mastodon.example"
        assert "Authorization" not in client.session.headers

    def test_bearer_header(self):
        client = MastodonClient("http://localhost:3000", access_token="tok")
        assert client.base_url == "http://localhost:3000"
        assert client.session.headers["Authorization"] == "Bearer tok"


class TestTimelines:
    def test_home_since_id(self, client):
        client.session.request.return_value = _response(body=[_status("2"), _status("1")])

        statuses = client.home_timeline_page(40, since_id="1")

        assert [s.id for s in statuses] == ["2", "1"]
        client.session.request.assert_called_once_with(
            "GET",
            "https://mastodon.example/api/v1/timelines/home",
            params={"limit": 40, "since_id": "1"},
            json=None,
            timeout=5,
        )

    def test_local_timeline_flag(self, client):
        client.session.request.return_value = _response(body=[])
        client.public_timeline_page(20, local_only=True)
        params = client.session.request.call_args.kwargs["params"]
        assert params == {"limit": 20, "local": "true"}

    def test_trending(self, client):
        client.session.request.return_value = _response(body=[_status("9")])
        assert client.trending_posts(10)[0].id == "9"
        assert client.session.request.call_args.args[1].endswith("/api/v1/trends/statuses")

    def test_boost_display(self, client):
        boosted = _status("5", account={"id": "2", "acct": "bob"})
        client.session.request.return_value = _response(body=[_status("6", reblog=boosted)])
        status = client.home_timeline_page()[0]
        assert status.display.id == "5"
        assert status.display.account.acct == "bob"


class TestAccounts:
    def test_posts_exclude_flags(self, client):
        client.session.request.return_value = _response(body=[])
        client.account_posts("42", 40, include_boosts=True, max_id="100")
        params = client.session.request.call_args.kwargs["params"]
        assert params == {
            "limit": 40,
            "exclude_reblogs": "false",
            "exclude_replies": "true",
            "max_id": "100",
        }

    def test_verify_credentials(self, client):
        client.session.request.return_value = _response(body={"id": 42, "acct": "me"})
        account = client.verify_credentials()
        assert account.id == "42"
        assert account.acct == "me"


class TestNotifications:
    def test_grouped_page_resolves_side_loads(self, client):
        body = {
            "accounts": [{"id": "1", "acct": "alice"}, {"id": "2", "acct": "bob"}],
            "statuses": [_status("77")],
            "notification_groups": [
                {
                    "group_key": "favourite-77",
                    "type": "favourite",
                    "notifications_count": 3,
                    "latest_page_notification_at": "2025-01-10T12:00:00.000Z",
                    "most_recent_notification_id": 900,
                    "sample_account_ids": ["2", "1", "missing"],
                    "status_id": "77",
                },
                {
                    "group_key": "ungrouped-1",
                    "type": "follow",
                    "latest_page_notification_at": "2025-01-09T12:00:00.000Z",
                    "most_recent_notification_id": "899",
                    "sample_account_ids": ["1"],
                },
            ],
        }
        client.session.request.return_value = _response(body=body)

        groups = client.grouped_notifications_page(40, max_id="901")

        assert client.session.request.call_args.kwargs["params"] == {"limit": 40, "max_id": "901"}
        favourite, follow = groups
        assert favourite.count == 3
        assert favourite.most_recent_id == "900"
        assert [a.acct for a in favourite.accounts] == ["bob", "alice"]
        assert favourite.status.id == "77"
        assert follow.count == 1
        assert follow.status is None


class TestApps:
    def test_register(self, client):
        client.session.request.return_value = _response(body={"client_id": "cid", "client_secret": "cs"})
        app = client.apps.register("tootboard")
        assert (app.client_id, app.client_secret) == ("cid", "cs")
        assert client.session.request.call_args.kwargs["json"]["scopes"] == "read"

    def test_authorize_url(self, client):
        url = client.apps.authorize_url("cid")
        assert url.startswith("https://mastodon.example/oauth/authorize?")
        assert "client_id=cid" in url
        assert "response_type=code" in url

    def test_exchange_token(self, client):
        client.session.request.return_value = _response(body={"access_token": "tok", "scope": "read"})
        token = client.apps.exchange_token("cid", "cs", "code123")
        assert token.access_token == "tok"
        assert client.session.request.call_args.kwargs["json"]["grant_type"] == "authorization_code"


class TestErrors:
    def test_timeout(self, client):
        client.session.request.side_effect = requests.Timeout()
        with pytest.raises(MastodonNetworkError, match="timed out"):
            client.home_timeline_page()

    def test_connection_error(self, client):
        client.session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(MastodonNetworkError):
            client.home_timeline_page()

    def test_unauthorized(self, client):
        client.session.request.return_value = _response(
            401, {"error": "The access token is invalid"}, "Unauthorized"
        )
        with pytest.raises(MastodonAuthenticationError, match="access token is invalid") as exc:
            client.verify_credentials()
        assert exc.value.status_code == 401

    def test_not_found(self, client):
        client.session.request.return_value = _response(404, {"error": "Record not found"}, "Not Found")
        with pytest.raises(MastodonNotFoundError):
            client.account_posts("missing")

    def test_server_error_without_body(self, client):
        client.session.request.return_value = _response(503, ValueError("no json"), "Service Unavailable")
        with pytest.raises(MastodonAPIError, match="HTTP 503 Service Unavailable") as exc:
            client.grouped_notifications()
        assert exc.value.status_code == 503

    def test_invalid_json(self, client):
        client.session.request.return_value = _response(200, ValueError("bad"))
        with pytest.raises(MastodonAPIError, match="Invalid JSON"):
            client.trending_posts()

    def test_no_content(self, client):
        client.session.request.return_value = _response(204)
        assert client.home_timeline_page() == []
