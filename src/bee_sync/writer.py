"""Date-partitioned markdown writer: one ``<YYYY-MM-DD>.md`` per UTC day."""

from __future__ import annotations
import re
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple, TypeVar

from .config import parse_date
from .errors import ConfigurationError, FormatError

DATE_FILE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

R = TypeVar("R")


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


def record_day(record) -> str:
    """UTC calendar day of a record (models carry an aware UTC ``start_time``)."""
    return record.start_time.date().isoformat()

def group_by_date(records: Sequence[R]) -> Dict[str, List[R]]:
    """Dates in order of first appearance; records within a date in fetch order."""
    groups: Dict[str, List[R]] = {}
    for record in records:
        groups.setdefault(record_day(record), []).append(record)
    return groups

def ensure_folder(path: Path):
    path.mkdir(parents=True, exist_ok=True)

def write_by_date(records: Sequence[R], directory: Path,
                  render: Callable[[str, List[R]], str], notifier: Notifier) -> List[Path]:
    """
    Render each date group and write it to ``directory/<date>.md``.

    Existing files are replaced, never appended to, so writing the same
    records twice leaves byte-identical files. Every group is rendered and
    encoded before the first file is opened; content that cannot be
    encoded raises FormatError with the folder untouched.

    Returns:
        The written paths, in group order.
    """
    directory = Path(directory)
    payloads: List[Tuple[str, bytes]] = []
    for day, group in group_by_date(records).items():
        try:
            payloads.append((day, render(day, group).encode("utf-8")))
        except UnicodeEncodeError as e:
            raise FormatError(f"Content for {day} cannot be written as UTF-8: {e}") from e

    ensure_folder(directory)
    written: List[Path] = []
    for day, payload in payloads:
        path = directory / f"{day}.md"
        path.write_bytes(payload)
        written.append(path)
        notifier.notify(f"Synced entries for {day}")
    return written

def last_synced_date(directory: Path) -> Optional[date]:
    """Newest ``YYYY-MM-DD.md`` in the folder, if any."""
    directory = Path(directory)
    if not directory.is_dir():
        return None
    dates = []
    for path in directory.glob("*.md"):
        if not DATE_FILE_RE.match(path.stem):
            continue
        try:
            dates.append(parse_date(path.stem))
        except ConfigurationError:
            continue  # e.g. 2025-13-40.md
    return max(dates) if dates else None
