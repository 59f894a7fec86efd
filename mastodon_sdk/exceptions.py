"""
Mastodon SDK exceptions
"""


class MastodonError(Exception):
    """Base exception for all Mastodon SDK errors"""

    pass


class MastodonNetworkError(MastodonError):
    """Raised when the server cannot be reached or the request times out"""

    pass


class MastodonAPIError(MastodonError):
    """Raised when API request fails"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MastodonNotFoundError(MastodonAPIError):
    """Raised when resource is not found (404)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class MastodonAuthenticationError(MastodonAPIError):
    """Raised when the access token is missing, expired or revoked (401/403)"""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message, status_code=status_code)
