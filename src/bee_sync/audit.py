"""
Audit trail for API traffic.

Every outbound request, inbound response and error seen during a sync is
appended to a markdown file (``api-logs.md`` in the sync folder), one
heading per entry:

    ## 2025-02-09T14:03:11.214512+00:00 - INFO
    GET https://api.bee.computer/v1/lifelogs params={...}

A failure to write the trail is reported on stderr and otherwise ignored;
it must never change the outcome of the sync that produced the entry.
"""

from __future__ import annotations
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol

AUDIT_FILE_NAME = "api-logs.md"
LEVELS = ("info", "error", "debug")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

@dataclass(frozen=True)
class AuditEntry:
    level: str
    message: str
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if self.level not in LEVELS:
            raise ValueError(f"Unknown audit level: {self.level}")

    def to_markdown(self) -> str:
        return f"\n## {self.timestamp.isoformat()} - {self.level.upper()}\n{self.message}\n"


class AuditSink(Protocol):
    def record(self, entry: AuditEntry) -> None: ...


class NullAuditLog:
    def record(self, entry: AuditEntry) -> None:
        pass

class MemoryAuditLog:
    def __init__(self):
        self.entries: List[AuditEntry] = []

    def record(self, entry: AuditEntry) -> None:
        self.entries.append(entry)

    def messages(self, level: Optional[str]=None) -> List[str]:
        return [e.message for e in self.entries if level is None or e.level == level]


class MarkdownAuditLog:
    """Append-only markdown log. The file (and its folder) is created on first write."""

    def __init__(self, path: Path, verbose: bool=False):
        self.path = Path(path)
        self.verbose = verbose

    def record(self, entry: AuditEntry) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(entry.to_markdown())
        except (OSError, ValueError) as e:
            print(f"Logging failed: {e}", file=sys.stderr)
            return
        if self.verbose:
            print(f"[{entry.level.upper()}] {entry.message}", file=sys.stderr)


def info(sink: AuditSink, message: str):
    sink.record(AuditEntry("info", message))

def error(sink: AuditSink, message: str):
    sink.record(AuditEntry("error", message))

def debug(sink: AuditSink, message: str):
    sink.record(AuditEntry("debug", message))
