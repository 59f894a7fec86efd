"""tootboard CLI — read timelines, notifications and metrics from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from datetime import datetime

from mastodon_sdk import MastodonClient, MastodonError

from . import __version__
from .config import (
    APP_NAME,
    DEFAULT_REDIRECT_URI,
    PAGE_LIMIT,
    get_log_path,
    load_config,
    make_client,
    save_config,
)
from .exceptions import TootboardError, ValidationError
from .metrics.aggregator import ACCEPTED_RANGES, compute_series
from .output import print_daily_metrics, print_notifications, print_statuses

logger = logging.getLogger(__name__)

TIMELINE_TYPES = ("home", "local", "federated", "trending")
MAX_FEED_LIMIT = 40
MAX_POSTS_LIMIT = 800


def _check_limit(limit: int, maximum: int) -> None:
    if limit <= 0 or limit > maximum:
        raise ValidationError(f"limit must be between 1 and {maximum}")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def cmd_login(args: argparse.Namespace) -> None:
    """Register an OAuth app if needed, authorize it and store the token."""
    config = load_config()
    instance = args.instance or config.instance
    if not instance:
        raise ValidationError("instance is required (use --instance)")

    config.instance = instance
    if not config.redirect_uri:
        config.redirect_uri = DEFAULT_REDIRECT_URI

    client = MastodonClient(config.instance, timeout=config.timeout)
    if not config.client_id or not config.client_secret or args.force:
        app = client.apps.register(APP_NAME, config.redirect_uri, "read")
        config.client_id = app.client_id
        config.client_secret = app.client_secret

    url = client.apps.authorize_url(config.client_id, config.redirect_uri, "read")
    print("Open this URL in your browser and authorize the app:")
    print(url)
    print()
    if not webbrowser.open(url):
        print("Could not open browser automatically.")

    code = input("Paste the authorization code: ").strip()
    if not code:
        raise ValidationError("authorization code is required")

    token = client.apps.exchange_token(
        config.client_id, config.client_secret, code, config.redirect_uri, "read"
    )
    config.access_token = token.access_token
    path = save_config(config)
    print(f"Login successful. Access token saved to {path}.")


def cmd_timeline(args: argparse.Namespace) -> None:
    """Print the newest statuses from one timeline."""
    _check_limit(args.limit, MAX_FEED_LIMIT)
    if args.type not in TIMELINE_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(TIMELINE_TYPES)}")

    client = make_client(load_config())
    if args.type == "home":
        statuses = client.home_timeline_page(args.limit)
    elif args.type == "local":
        statuses = client.public_timeline_page(args.limit, local_only=True)
    elif args.type == "federated":
        statuses = client.public_timeline_page(args.limit, local_only=False)
    else:
        statuses = client.trending_posts(args.limit)
    print_statuses(statuses)


def cmd_posts(args: argparse.Namespace) -> None:
    """Print the authenticated account's own posts, paging 40 at a time."""
    _check_limit(args.limit, MAX_POSTS_LIMIT)

    client = make_client(load_config())
    account = client.verify_credentials()

    target = args.limit
    show_progress = target > PAGE_LIMIT
    collected = []
    max_id = None
    while len(collected) < target:
        page_limit = min(PAGE_LIMIT, target - len(collected))
        page = client.account_posts(
            account.id,
            page_limit,
            include_boosts=args.boosts,
            include_replies=args.replies,
            max_id=max_id,
        )
        if not page:
            break
        collected.extend(page)
        max_id = page[-1].id
        if show_progress:
            print(f"Fetched {len(collected)}/{target}...", end="\r", file=sys.stderr)

    if show_progress:
        print(file=sys.stderr)
    print_statuses(collected)


def cmd_notifications(args: argparse.Namespace) -> None:
    """Print the newest grouped notifications."""
    _check_limit(args.limit, MAX_FEED_LIMIT)
    client = make_client(load_config())
    print_notifications(client.grouped_notifications(args.limit))


def cmd_metrics(args: argparse.Namespace) -> None:
    """Print follows, likes and boosts per day for the last 7 or 30 days."""
    if args.range not in ACCEPTED_RANGES:
        raise ValidationError("range must be 7 or 30")

    client = make_client(load_config())
    show_progress = args.range > 7
    scanned = 0

    def on_progress(count: int) -> None:
        nonlocal scanned
        scanned = count
        if show_progress:
            print(f"Scanned {count} groups...", end="\r", file=sys.stderr)

    series = compute_series(
        args.range,
        datetime.now().astimezone(),
        lambda limit, max_id: client.grouped_notifications_page(limit, max_id=max_id),
        on_progress=on_progress,
    )
    if show_progress and scanned:
        print(file=sys.stderr)
    print_daily_metrics(series)


def cmd_ui(args: argparse.Namespace) -> None:
    """Start the interactive dashboard."""
    from .dashboard.app import run_dashboard

    config = load_config()
    client = make_client(config)
    run_dashboard(client, config, metrics_range=args.range)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tootboard",
        description="Read a Mastodon account from the terminal",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command")

    # login
    p_login = sub.add_parser("login", help="Authorize tootboard against an instance")
    p_login.add_argument("--instance", help="Instance domain (e.g. mastodon.social)")
    p_login.add_argument("--force", action="store_true",
                         help="Re-register the OAuth app even if one exists in config")
    p_login.set_defaults(func=cmd_login)

    # timeline
    p_timeline = sub.add_parser("timeline", help="Show a timeline")
    p_timeline.add_argument("--limit", "-n", type=int, default=20,
                            help="Number of statuses to fetch (1-40)")
    p_timeline.add_argument("--type", "-t", default="home",
                            help="Timeline type: home, local, federated, trending")
    p_timeline.set_defaults(func=cmd_timeline)

    # posts
    p_posts = sub.add_parser("posts", help="Show your own posts")
    p_posts.add_argument("--limit", "-n", type=int, default=20,
                         help="Number of statuses to fetch (1-800)")
    p_posts.add_argument("--boosts", action="store_true", help="Include boosts in results")
    p_posts.add_argument("--replies", action="store_true", help="Include replies in results")
    p_posts.set_defaults(func=cmd_posts)

    # notifications
    p_notes = sub.add_parser("notifications", help="Show grouped notifications")
    p_notes.add_argument("--limit", "-n", type=int, default=20,
                         help="Number of notifications to fetch (1-40)")
    p_notes.set_defaults(func=cmd_notifications)

    # metrics
    p_metrics = sub.add_parser("metrics", help="Daily follows, likes and boosts")
    p_metrics.add_argument("--range", "-r", type=int, default=7, help="Range in days (7 or 30)")
    p_metrics.set_defaults(func=cmd_metrics)

    # ui
    p_ui = sub.add_parser("ui", help="Start the interactive dashboard")
    p_ui.add_argument("--range", "-r", type=int, default=7, choices=ACCEPTED_RANGES,
                      help="Initial metrics range in days")
    p_ui.set_defaults(func=cmd_ui)

    return parser


def configure_logging(command: str | None, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if command == "ui":
        # The dashboard owns the terminal; log to a file instead.
        log_path = get_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=str(log_path), level=level, format=fmt)
    else:
        logging.basicConfig(stream=sys.stderr, level=level, format=fmt)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(0)

    configure_logging(args.command, args.verbose)
    try:
        args.func(args)
    except (TootboardError, MastodonError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
