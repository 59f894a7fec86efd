"""
Mastodon SDK for Python

A small typed client for the parts of the Mastodon REST API that tootboard
reads: timelines, account posts, grouped notifications and the OAuth
application flow.

Example:
    >>> from mastodon_sdk import MastodonClient
    >>>
    >>> client = MastodonClient(
    ...     instance='mastodon.social',
    ...     access_token='your-token'
    ... )
    >>>
    >>> # Newest 40 posts from the home timeline
    >>> statuses = client.home_timeline_page(limit=40)
    >>>
    >>> # One page of grouped notifications older than a known id
    >>> groups = client.grouped_notifications_page(limit=40, max_id='1234')
"""

from .client import MastodonClient
from .exceptions import (
    MastodonError,
    MastodonAPIError,
    MastodonNetworkError,
    MastodonNotFoundError,
    MastodonAuthenticationError,
)
from .models import Account, Application, GroupedNotification, Status, Token

__version__ = "0.3.0"
__all__ = [
    "MastodonClient",
    "MastodonError",
    "MastodonAPIError",
    "MastodonNetworkError",
    "MastodonNotFoundError",
    "MastodonAuthenticationError",
    "Account",
    "Application",
    "GroupedNotification",
    "Status",
    "Token",
]
