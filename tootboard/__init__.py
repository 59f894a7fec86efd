"""tootboard — terminal dashboard and reports for a Mastodon account."""

__version__ = "0.3.0"
