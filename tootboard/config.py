"""Configuration loading and constants for tootboard."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"
DEFAULT_TIMEOUT = 30.0
APP_NAME = "tootboard"

# Page size for every feed request; the server caps limits at 40
PAGE_LIMIT = 40

# Keys persisted to config.yaml, in write order
_PERSISTED_KEYS = ("instance", "client_id", "client_secret", "access_token", "redirect_uri")


@dataclass(frozen=True)
class Theme:
    """Colors used by the renderers.

    Values are Rich style strings. A theme is built once from the config file
    and handed to each rendering function.
    """

    follows: str = "color(70)"
    likes: str = "color(220)"
    boosts: str = "color(33)"
    selected: str = "bold color(86)"
    author: str = "bold cyan"
    time: str = "yellow"
    muted: str = "grey58"
    active_tab: str = "bold reverse color(86)"
    tab: str = "grey70"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Theme":
        data = data or {}
        known = {f.name for f in fields(cls)}
        overrides = {k: str(v) for k, v in data.items() if k in known and v}
        return cls(**overrides)


@dataclass
class Config:
    """Persisted credentials plus optional presentation settings."""

    instance: str = ""
    client_id: str = ""
    client_secret: str = ""
    access_token: str = ""
    redirect_uri: str = ""
    timeout: float = DEFAULT_TIMEOUT
    theme: Theme = field(default_factory=Theme)
    path: Path | None = None

    def require_credentials(self) -> None:
        """Raise ConfigError unless an instance and access token are set."""
        if not self.instance or not self.access_token:
            raise ConfigError(
                "missing config; run `tootboard login --instance <domain>` first"
            )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {key: getattr(self, key) for key in _PERSISTED_KEYS}
        if self.timeout != DEFAULT_TIMEOUT:
            data["timeout"] = self.timeout
        theme = asdict(self.theme)
        defaults = asdict(Theme())
        changed = {k: v for k, v in theme.items() if defaults.get(k) != v}
        if changed:
            data["theme"] = changed
        return data


def get_config_dir() -> Path:
    """Directory holding config.yaml and the dashboard log.

    Resolution order: TOOTBOARD_CONFIG (its parent), XDG_CONFIG_HOME, ~/.config.
    """
    override = os.environ.get("TOOTBOARD_CONFIG")
    if override:
        return Path(override).expanduser().parent
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else Path.home() / ".config"
    return root / APP_NAME


def get_config_path() -> Path:
    override = os.environ.get("TOOTBOARD_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.yaml"


def get_log_path() -> Path:
    return get_config_dir() / "logs" / "tootboard.log"


def load_config(path: Path | None = None) -> Config:
    """Load config.yaml, applying environment overrides.

    A missing file yields an empty config. TOOTBOARD_INSTANCE and
    TOOTBOARD_ACCESS_TOKEN take precedence over values from the file.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    path = path or get_config_path()
    data: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"read config {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"parse config {path}: expected a mapping")
        data = loaded or {}

    try:
        timeout = float(data.get("timeout") or DEFAULT_TIMEOUT)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"parse config {path}: invalid timeout") from e

    theme = data.get("theme")
    if theme is not None and not isinstance(theme, dict):
        raise ConfigError(f"parse config {path}: theme must be a mapping")

    config = Config(
        instance=str(data.get("instance") or ""),
        client_id=str(data.get("client_id") or ""),
        client_secret=str(data.get("client_secret") or ""),
        access_token=str(data.get("access_token") or ""),
        redirect_uri=str(data.get("redirect_uri") or ""),
        timeout=timeout,
        theme=Theme.from_dict(theme),
        path=path,
    )

    env_instance = os.environ.get("TOOTBOARD_INSTANCE")
    if env_instance:
        config.instance = env_instance
    env_token = os.environ.get("TOOTBOARD_ACCESS_TOKEN")
    if env_token:
        config.access_token = env_token
    return config


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write config.yaml with owner-only permissions.

    Raises:
        ConfigError: If the directory or file cannot be written.
    """
    path = path or config.path or get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False))
        path.chmod(0o600)
    except OSError as e:
        raise ConfigError(f"write config {path}: {e}") from e
    config.path = path
    return path


def make_client(config: Config):
    """Build an API client for a config that has credentials."""
    from mastodon_sdk import MastodonClient

    config.require_credentials()
    return MastodonClient(config.instance, config.access_token, timeout=config.timeout)
