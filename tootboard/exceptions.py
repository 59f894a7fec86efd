"""Application-level errors raised before any network activity."""


class TootboardError(Exception):
    """Base exception for tootboard errors."""


class ConfigError(TootboardError):
    """Credentials or the configuration file are missing or unusable."""


class ValidationError(TootboardError):
    """A command-line or API argument is out of range."""
