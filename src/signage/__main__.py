"""
Entry point for: python3 -m src.signage

Operator commands for inspecting and maintaining the signage state on disk.
"""

import argparse
import json
import sys
from datetime import datetime
from typing import List, Optional

from src.common.config import Config
from src.common.logger import setup_logger
from .context import SignageContext
from .document_import import extract_text
from .exceptions import DocumentExtractionError, OversizedDocumentError

logger = setup_logger(__name__)


def _format_ts(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def cmd_status(ctx: SignageContext, args: argparse.Namespace) -> int:
    config = ctx.load_configuration()
    print(f"School:         {config.school_name}")
    print(f"Safe mode:      {'YES' if config.is_safe_mode else 'no'}")
    print(f"Theme:          {config.theme.name}")
    print(f"Pages:          {len(config.pages)} ({len(config.enabled_pages())} enabled)")
    print(f"Announcements:  {len(config.announcements)} ({len(config.active_announcements())} active)")
    print(f"Events:         {len(config.events)}")
    print(f"Custom widgets: {len(config.custom_widgets)}")
    print(f"Emergency:      {'ACTIVE' if config.emergency.active else 'off'}")
    return 0


def cmd_logs(ctx: SignageContext, args: argparse.Namespace) -> int:
    for entry in ctx.list_logs():
        print(f"{_format_ts(entry.timestamp)} [{entry.level.upper()}] {entry.source}: {entry.message}")
    return 0


def cmd_login_logs(ctx: SignageContext, args: argparse.Namespace) -> int:
    for entry in ctx.login_log.list():
        outcome = "OK  " if entry.success else "FAIL"
        print(f"{_format_ts(entry.timestamp)} {outcome} {entry.email} ({entry.reason})")
    return 0


def cmd_clear_logs(ctx: SignageContext, args: argparse.Namespace) -> int:
    ctx.clear_logs()
    print("System log cleared")
    return 0


def cmd_fetch(ctx: SignageContext, args: argparse.Namespace) -> int:
    data = ctx.fetch_cached(args.key, args.url, args.ttl)
    print(json.dumps(data, indent=2))
    return 0 if data is not None else 1


def cmd_extract(ctx: SignageContext, args: argparse.Namespace) -> int:
    try:
        print(extract_text(args.file, max_pages=ctx.settings.max_pdf_pages))
    except OversizedDocumentError as e:
        print(str(e), file=sys.stderr)
        return 2
    except DocumentExtractionError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="School signage state tools")
    parser.add_argument('--config', help="Settings YAML path")
    parser.add_argument('--data-dir', help="Storage directory override")
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('status', help="Show the stored configuration summary").set_defaults(func=cmd_status)
    sub.add_parser('logs', help="Show the system log").set_defaults(func=cmd_logs)
    sub.add_parser('login-logs', help="Show admin login attempts").set_defaults(func=cmd_login_logs)
    sub.add_parser('clear-logs', help="Empty the system log").set_defaults(func=cmd_clear_logs)

    fetch = sub.add_parser('fetch', help="Fetch a URL through the remote data cache")
    fetch.add_argument('key', help="Cache key")
    fetch.add_argument('url', help="Resource URL")
    fetch.add_argument('--ttl', type=float, default=None, help="TTL in seconds")
    fetch.set_defaults(func=cmd_fetch)

    extract = sub.add_parser('extract', help="Print the text of a newsletter PDF")
    extract.add_argument('file', help="PDF path")
    extract.set_defaults(func=cmd_extract)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the signage tools."""
    args = build_parser().parse_args(argv)

    config = Config(args.config)
    if args.data_dir:
        config.set('storage.data_dir', args.data_dir)

    ctx = SignageContext.from_config(config)
    return args.func(ctx, args)


if __name__ == "__main__":
    sys.exit(main())
