"""
Sync orchestration.

A sync runs strictly in order

    IDLE -> FETCHING -> GROUPING -> WRITING -> IDLE

The whole remote collection is fetched before anything is parsed, and every
record is parsed before the first file is written, so a malformed response
leaves the folder untouched. Any failure drops straight back to IDLE after
being written to the audit trail and reported with one generic notification;
nothing is retried or resumed.
"""

from __future__ import annotations
import traceback
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import requests

from . import audit
from .audit import AUDIT_FILE_NAME, AuditSink, MarkdownAuditLog
from .client import fetch_all
from .config import SyncConfig
from .errors import SyncError
from .models import Conversation, Lifelog
from .render import render_conversations, render_daily_log
from .writer import Notifier, last_synced_date, write_by_date

CONVERSATIONS_SUBFOLDER = "Conversations"
MISSING_KEY_MESSAGE = "Please set your Bee API key in settings"


class SyncState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    GROUPING = "grouping"
    WRITING = "writing"


class Syncer:
    def __init__(self, config: SyncConfig, notifier: Notifier,
                 audit_sink: Optional[AuditSink]=None, session: Optional[requests.Session]=None):
        self.config = config
        self.notifier = notifier
        self.audit = audit_sink or MarkdownAuditLog(config.folder / AUDIT_FILE_NAME, verbose=config.verbose)
        self.session = session
        self.state = SyncState.IDLE
        self.written: List[Path] = []

    def _run(self, label: str, fetch: Callable[[], list], parse: Callable[[dict], object],
             directory: Path, render: Callable[[str, list], str]) -> bool:
        if not self.config.api_key:
            self.notifier.notify(MISSING_KEY_MESSAGE)
            return False

        self.written = []
        try:
            self.notifier.notify(f"Starting {label} sync...")
            self.state = SyncState.FETCHING
            raw = fetch()

            self.state = SyncState.GROUPING
            records: Sequence = [parse(r) for r in raw]
            audit.info(self.audit, f"{label}: fetched {len(records)} records")

            self.state = SyncState.WRITING
            self.written = write_by_date(records, directory, render, self.notifier)
        except (SyncError, OSError, ValueError) as e:
            audit.error(self.audit, f"Error syncing {label}: {e}\n```\n{traceback.format_exc()}```")
            self.notifier.notify(f"Error syncing {label}. Check {AUDIT_FILE_NAME} for details.")
            return False
        finally:
            self.state = SyncState.IDLE

        audit.info(self.audit, f"{label}: wrote {len(self.written)} files to {directory}")
        self.notifier.notify(f"{label} sync complete!")
        return True

    def sync_daily_logs(self, full: bool=False) -> bool:
        """Fetch lifelogs and write ``<folder>/<date>.md``.

        Unless ``full``, fetching resumes at the newest day already on disk
        (that day is fetched again in full and overwritten), falling back to
        the configured start date.
        """
        folder = self.config.folder

        def fetch():
            start = None if full else last_synced_date(folder)
            start = start or self.config.start_day
            return fetch_all(self.config, "lifelogs", self.audit, self.session, start=start.isoformat())

        return self._run("Bee Daily", fetch, Lifelog.from_api, folder, render_daily_log)

    def sync_conversations(self) -> bool:
        def fetch():
            return fetch_all(self.config, "conversations", self.audit, self.session)

        directory = self.config.folder / CONVERSATIONS_SUBFOLDER
        return self._run("Bee Conversations", fetch, Conversation.from_api, directory, render_conversations)


def sync_daily_logs(config: SyncConfig, notifier: Notifier, audit_sink: Optional[AuditSink]=None,
                    session: Optional[requests.Session]=None, full: bool=False) -> bool:
    return Syncer(config, notifier, audit_sink, session).sync_daily_logs(full=full)

def sync_conversations(config: SyncConfig, notifier: Notifier, audit_sink: Optional[AuditSink]=None,
                       session: Optional[requests.Session]=None) -> bool:
    return Syncer(config, notifier, audit_sink, session).sync_conversations()
