#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bee Sync CLI – v0.1.0
"""

# Pulls daily logs (lifelogs) and conversations from the Bee API and keeps a
# folder of markdown notes in step with them, one file per UTC day:
#
#   <folder>/YYYY-MM-DD.md                 daily logs
#   <folder>/Conversations/YYYY-MM-DD.md   conversations
#   <folder>/api-logs.md                   audit trail of every API call
#
# Each run rewrites whole day files, so re-running a sync is always safe.

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Dict, Any

from . import __version__
from .config import (
    SETTINGS_PATH, Settings, load_settings, save_settings, resolve_config, parse_date, mask_key,
)
from .errors import ConfigurationError
from .sync import Syncer

# ── Utilities ────────────────────────────────────────────────────────────────
def eprint(msg: str, verbose: bool=False):
    if verbose:
        print(msg, file=sys.stderr)

def progress_print(msg: str, quiet: bool=False):
    if not quiet:
        print(msg, file=sys.stderr)


class ConsoleNotifier:
    """Transient status messages on stderr."""

    def __init__(self, quiet: bool=False):
        self.quiet = quiet

    def notify(self, message: str) -> None:
        progress_print(message, self.quiet)


def _overrides(args) -> Dict[str,Any]:
    return {
        "api_key": args.api_key,
        "folder": args.folder,
        "base_url": args.base_url,
        "verbose": args.verbose,
    }

def _settings_path(args) -> Path:
    return Path(args.settings).expanduser() if args.settings else SETTINGS_PATH

def _build_syncer(args) -> Syncer:
    settings = load_settings(_settings_path(args))
    config = resolve_config(settings, _overrides(args))
    eprint(f"[Config] folder={config.folder} base_url={config.base_url} key={mask_key(config.api_key)}", args.verbose)
    return Syncer(config, ConsoleNotifier(args.quiet))

# ── Command Handlers ────────────────────────────────────────────────────────
def handle_daily(args) -> int:
    syncer = _build_syncer(args)
    ok = syncer.sync_daily_logs(full=args.full)
    eprint(f"[Sync] wrote {len(syncer.written)} files", args.verbose)
    return 0 if ok else 1

def handle_conversations(args) -> int:
    syncer = _build_syncer(args)
    ok = syncer.sync_conversations()
    eprint(f"[Sync] wrote {len(syncer.written)} files", args.verbose)
    return 0 if ok else 1

def handle_config(args) -> int:
    path = _settings_path(args)
    settings = load_settings(path)
    changed = False
    if args.api_key is not None:
        settings.api_key = args.api_key.strip()
        changed = True
    if args.folder is not None:
        settings.folder_path = args.folder
        changed = True
    if args.start_date is not None:
        parse_date(args.start_date)
        settings.start_date = args.start_date
        changed = True
    if changed:
        save_settings(settings, path)
        progress_print(f"Saved settings to {path}", args.quiet)
    if args.show or not changed:
        _print_settings(settings)
    return 0

def _print_settings(settings: Settings):
    print(f"apiKey:     {mask_key(settings.api_key)}")
    print(f"folderPath: {settings.folder_path}")
    print(f"startDate:  {settings.start_date}")

# ── CLI Setup ────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bee-sync", description="Bee Sync - mirror Bee data into markdown notes")

    parser.add_argument("-v","--verbose", action="store_true", help="Enable verbose output for debugging.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress messages to stderr.")
    parser.add_argument("--settings", type=str, help=f"Settings file (default: {SETTINGS_PATH}).")
    parser.add_argument("--base-url", type=str, help="API base URL.")
    parser.add_argument("--api-key", type=str, help="Bee API key (overrides BEE_API_KEY and settings; saved by `config`).")
    parser.add_argument("--folder", type=str, help="Target folder for markdown files (saved by `config`).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subs = parser.add_subparsers(dest="cmd", title="Commands", required=True)

    p_daily = subs.add_parser("daily", help="Sync daily logs into <folder>/YYYY-MM-DD.md.")
    p_daily.add_argument("--full", action="store_true", help="Ignore the last synced date and start from the configured start date.")
    p_daily.set_defaults(func=handle_daily)

    p_conv = subs.add_parser("conversations", help="Sync conversations into <folder>/Conversations/YYYY-MM-DD.md.")
    p_conv.set_defaults(func=handle_conversations)

    p_config = subs.add_parser("config", help="Show or update saved settings.")
    p_config.add_argument("--start-date", type=str, metavar="YYYY-MM-DD", help="Default start date for the first sync.")
    p_config.add_argument("--show", action="store_true", help="Print settings (API key masked).")
    p_config.set_defaults(func=handle_config)

    return parser

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

if __name__=="__main__":
    sys.exit(main())
