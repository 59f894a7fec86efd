"""
Typed records returned by the Mastodon SDK.

All records are frozen: they are handed from background fetch threads to the
UI thread and must not change after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Account:
    """A user account as embedded in statuses and notifications."""

    id: str
    acct: str
    username: str = ""
    display_name: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=str(data.get("id", "")),
            acct=data.get("acct") or data.get("username") or "",
            username=data.get("username") or "",
            display_name=data.get("display_name") or "",
            url=data.get("url") or "",
        )


@dataclass(frozen=True)
class Status:
    """A post. Boosts carry the boosted post in ``reblog``."""

    id: str
    created_at: str
    content: str
    account: Account
    reblog: Optional["Status"] = None
    url: str = ""
    replies_count: int = 0
    reblogs_count: int = 0
    favourites_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Status":
        reblog = data.get("reblog")
        return cls(
            id=str(data.get("id", "")),
            created_at=data.get("created_at") or "",
            content=data.get("content") or "",
            account=Account.from_dict(data.get("account") or {}),
            reblog=cls.from_dict(reblog) if reblog else None,
            url=data.get("url") or "",
            replies_count=int(data.get("replies_count") or 0),
            reblogs_count=int(data.get("reblogs_count") or 0),
            favourites_count=int(data.get("favourites_count") or 0),
        )

    @property
    def display(self) -> "Status":
        """The status whose author and text should be shown."""
        return self.reblog if self.reblog is not None else self


@dataclass(frozen=True)
class GroupedNotification:
    """A burst of same-type notifications collapsed into one record.

    ``count`` is the number of underlying notifications folded into the group,
    ``latest_at`` the time of the newest one and ``most_recent_id`` its id,
    which doubles as the pagination key for the next older page.
    """

    group_key: str
    type: str
    count: int
    latest_at: str
    most_recent_id: str
    accounts: tuple[Account, ...] = field(default_factory=tuple)
    status: Optional[Status] = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        accounts: dict[str, Account] | None = None,
        statuses: dict[str, Status] | None = None,
    ) -> "GroupedNotification":
        """Build a group from a ``notification_groups`` entry.

        The v2 endpoint side-loads accounts and statuses once per page and
        refers to them by id; ``accounts`` and ``statuses`` are those lookups.
        """
        accounts = accounts or {}
        statuses = statuses or {}
        sample = [
            accounts[str(account_id)]
            for account_id in data.get("sample_account_ids") or []
            if str(account_id) in accounts
        ]
        status_id = data.get("status_id")
        return cls(
            group_key=data.get("group_key") or "",
            type=data.get("type") or "",
            count=max(1, int(data.get("notifications_count") or 1)),
            latest_at=data.get("latest_page_notification_at") or "",
            most_recent_id=str(data.get("most_recent_notification_id") or ""),
            accounts=tuple(sample),
            status=statuses.get(str(status_id)) if status_id else None,
        )


@dataclass(frozen=True)
class Application:
    """OAuth application credentials returned by ``POST /api/v1/apps``."""

    client_id: str
    client_secret: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Application":
        return cls(
            client_id=data.get("client_id") or "",
            client_secret=data.get("client_secret") or "",
        )


@dataclass(frozen=True)
class Token:
    access_token: str
    token_type: str = "Bearer"
    scope: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Token":
        return cls(
            access_token=data.get("access_token") or "",
            token_type=data.get("token_type") or "Bearer",
            scope=data.get("scope") or "",
        )
