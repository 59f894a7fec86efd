"""
Mastodon SDK Client
Main API client for reading timelines, posts and notifications
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from .exceptions import (
    MastodonAPIError,
    MastodonAuthenticationError,
    MastodonNetworkError,
    MastodonNotFoundError,
)
from .models import Account, Application, GroupedNotification, Status, Token

logger = logging.getLogger(__name__)

OOB_REDIRECT_URI = 'urn:ietf:wg:oauth:2.0:oob'


def _flag(value: bool) -> str:
    return 'true' if value else 'false'


def _statuses(response: Any) -> List[Status]:
    if not isinstance(response, list):
        return []
    return [Status.from_dict(item) for item in response]


class TimelinesAPI:
    """Timeline API endpoints"""

    def __init__(self, client: 'MastodonClient'):
        self.client = client

    def home_page(self, limit: int = 40, since_id: Optional[str] = None,
                  max_id: Optional[str] = None) -> List[Status]:
        """Get a page of the home timeline, newest first"""
        params: Dict[str, Any] = {'limit': limit}
        if since_id:
            params['since_id'] = since_id
        if max_id:
            params['max_id'] = max_id
        return _statuses(self.client._request('GET', '/api/v1/timelines/home', params=params))

    def public_page(
        self,
        limit: int = 40,
        local_only: bool = False,
        media_only: bool = False,
        since_id: Optional[str] = None,
        max_id: Optional[str] = None,
    ) -> List[Status]:
        """Get a page of the public timeline, newest first

        Args:
            limit: Maximum number of statuses (server caps at 40)
            local_only: Only statuses from this instance (the "local" timeline)
            media_only: Only statuses with media attachments
            since_id: Return statuses newer than this id
            max_id: Return statuses older than this id

        Returns:
            List of statuses
        """
        params: Dict[str, Any] = {'limit': limit}
        if local_only:
            params['local'] = _flag(True)
        if media_only:
            params['only_media'] = _flag(True)
        if since_id:
            params['since_id'] = since_id
        if max_id:
            params['max_id'] = max_id
        return _statuses(self.client._request('GET', '/api/v1/timelines/public', params=params))

    def trending(self, limit: int = 40) -> List[Status]:
        """Get currently trending statuses"""
        return _statuses(
            self.client._request('GET', '/api/v1/trends/statuses', params={'limit': limit})
        )


class AccountsAPI:
    """Account API endpoints"""

    def __init__(self, client: 'MastodonClient'):
        self.client = client

    def verify_credentials(self) -> Account:
        """Get the account the access token belongs to"""
        response = self.client._request('GET', '/api/v1/accounts/verify_credentials')
        return Account.from_dict(response if isinstance(response, dict) else {})

    def statuses(
        self,
        account_id: str,
        limit: int = 40,
        include_boosts: bool = False,
        include_replies: bool = False,
        max_id: Optional[str] = None,
    ) -> List[Status]:
        """Get posts written by an account, newest first

        Args:
            account_id: Account ID
            limit: Maximum number of statuses (server caps at 40)
            include_boosts: Include boosts of other people's posts
            include_replies: Include replies
            max_id: Return statuses older than this id

        Returns:
            List of statuses
        """
        params: Dict[str, Any] = {
            'limit': limit,
            'exclude_reblogs': _flag(not include_boosts),
            'exclude_replies': _flag(not include_replies),
        }
        if max_id:
            params['max_id'] = max_id
        return _statuses(
            self.client._request('GET', f'/api/v1/accounts/{account_id}/statuses', params=params)
        )


class NotificationsAPI:
    """Grouped notifications API endpoints (v2)"""

    def __init__(self, client: 'MastodonClient'):
        self.client = client

    def grouped(self, limit: int = 40) -> List[GroupedNotification]:
        """Get the newest grouped notifications"""
        return self.grouped_page(limit=limit)

    def grouped_page(self, limit: int = 40, max_id: Optional[str] = None) -> List[GroupedNotification]:
        """Get one page of grouped notifications, newest first

        Args:
            limit: Maximum number of groups (server caps at 40)
            max_id: Return groups older than this notification id

        Returns:
            List of grouped notifications with accounts and statuses resolved
        """
        params: Dict[str, Any] = {'limit': limit}
        if max_id:
            params['max_id'] = max_id
        response = self.client._request('GET', '/api/v2/notifications', params=params)
        if not isinstance(response, dict):
            return []

        accounts = {
            str(item.get('id')): Account.from_dict(item)
            for item in response.get('accounts') or []
        }
        statuses = {
            str(item.get('id')): Status.from_dict(item)
            for item in response.get('statuses') or []
        }
        return [
            GroupedNotification.from_dict(group, accounts=accounts, statuses=statuses)
            for group in response.get('notification_groups') or []
        ]


class AppsAPI:
    """OAuth application registration and token exchange"""

    def __init__(self, client: 'MastodonClient'):
        self.client = client

    def register(self, client_name: str, redirect_uri: str = OOB_REDIRECT_URI,
                 scopes: str = 'read') -> Application:
        """Register an OAuth application on the instance"""
        data = {
            'client_name': client_name,
            'redirect_uris': redirect_uri,
            'scopes': scopes,
        }
        response = self.client._request('POST', '/api/v1/apps', json=data)
        return Application.from_dict(response if isinstance(response, dict) else {})

    def authorize_url(self, client_id: str, redirect_uri: str = OOB_REDIRECT_URI,
                      scopes: str = 'read') -> str:
        """Build the URL the user opens to authorize the application"""
        query = urlencode({
            'client_id': client_id,
            'redirect_uri': redirect_uri,
            'response_type': 'code',
            'scope': scopes,
        })
        return f'{self.client.base_url}/oauth/authorize?{query}'

    def exchange_token(
        self,
        client_id: str,
        client_secret: str,
        code: str,
        redirect_uri: str = OOB_REDIRECT_URI,
        scopes: str = 'read',
    ) -> Token:
        """Exchange an authorization code for an access token"""
        data = {
            'grant_type': 'authorization_code',
            'client_id': client_id,
            'client_secret': client_secret,
            'redirect_uri': redirect_uri,
            'code': code,
            'scope': scopes,
        }
        response = self.client._request('POST', '/oauth/token', json=data)
        return Token.from_dict(response if isinstance(response, dict) else {})


class MastodonClient:
    """
    Main Mastodon SDK client

    Usage:
        client = MastodonClient(
            instance='mastodon.social',
            access_token='your-token'
        )

        # Newest posts on the local timeline
        statuses = client.public_timeline_page(limit=40, local_only=True)
    """

    def __init__(
        self,
        instance: str,
        access_token: Optional[str] = None,
        timeout: float = 30,
    ):
        instance = instance.strip().rstrip('/')
        if not instance.startswith(('http://', 'https://')):
            instance = f'https://{instance}'
        self.base_url = instance
        self.access_token = access_token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers['Accept'] = 'application/json'

        if access_token:
            self.session.headers['Authorization'] = f'Bearer {access_token}'

        # Initialize API endpoints
        self.timelines = TimelinesAPI(self)
        self.accounts = AccountsAPI(self)
        self.notifications = NotificationsAPI(self)
        self.apps = AppsAPI(self)

    # Flat aliases for the operations the dashboard consumes.

    def home_timeline_page(self, limit: int = 40, since_id: Optional[str] = None) -> List[Status]:
        return self.timelines.home_page(limit=limit, since_id=since_id)

    def public_timeline_page(self, limit: int = 40, local_only: bool = False, media_only: bool = False,
                             since_id: Optional[str] = None, max_id: Optional[str] = None) -> List[Status]:
        return self.timelines.public_page(limit=limit, local_only=local_only, media_only=media_only,
                                          since_id=since_id, max_id=max_id)

    def trending_posts(self, limit: int = 40) -> List[Status]:
        return self.timelines.trending(limit=limit)

    def account_posts(self, account_id: str, limit: int = 40, include_boosts: bool = False,
                      include_replies: bool = False, max_id: Optional[str] = None) -> List[Status]:
        return self.accounts.statuses(account_id, limit=limit, include_boosts=include_boosts,
                                      include_replies=include_replies, max_id=max_id)

    def verify_credentials(self) -> Account:
        return self.accounts.verify_credentials()

    def grouped_notifications(self, limit: int = 40) -> List[GroupedNotification]:
        return self.notifications.grouped(limit=limit)

    def grouped_notifications_page(self, limit: int = 40,
                                   max_id: Optional[str] = None) -> List[GroupedNotification]:
        return self.notifications.grouped_page(limit=limit, max_id=max_id)

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None
    ) -> Any:
        """Make HTTP request to API"""
        url = f'{self.base_url}{path}'
        logger.debug('%s %s params=%s', method, path, params)

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout
            )
        except requests.Timeout:
            raise MastodonNetworkError(f'Request to {url} timed out after {self.timeout}s')
        except requests.RequestException as e:
            raise MastodonNetworkError(f'Request to {url} failed: {e}')

        if response.status_code >= 400:
            raise self._error_for(response)

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except ValueError:
            raise MastodonAPIError(
                f'Invalid JSON from {path}', status_code=response.status_code
            )

    @staticmethod
    def _error_for(response: requests.Response) -> MastodonAPIError:
        """Map an error response to the matching exception"""
        message = ''
        try:
            body = response.json()
            if isinstance(body, dict):
                message = body.get('error_description') or body.get('error') or ''
        except ValueError:
            pass
        if not message:
            message = f'HTTP {response.status_code} {response.reason or ""}'.strip()

        if response.status_code in (401, 403):
            return MastodonAuthenticationError(message, status_code=response.status_code)
        if response.status_code == 404:
            return MastodonNotFoundError(message)
        return MastodonAPIError(message, status_code=response.status_code)

    def close(self):
        """Close the session"""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
