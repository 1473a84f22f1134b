"""Tests for the audit trail."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from bee_sync.audit import AuditEntry, MarkdownAuditLog, NullAuditLog


def test_entry_format():
    entry = AuditEntry("error", "boom", datetime(2025, 2, 9, 12, 0, tzinfo=timezone.utc))
    assert entry.to_markdown() == "\n## 2025-02-09T12:00:00+00:00 - ERROR\nboom\n"

def test_unknown_level():
    with pytest.raises(ValueError):
        AuditEntry("warning", "x")

def test_appends_and_creates_folder(tmp_path: Path):
    log = MarkdownAuditLog(tmp_path / "vault" / "api-logs.md")
    log.record(AuditEntry("info", "first"))
    log.record(AuditEntry("debug", "second"))
    text = log.path.read_text()
    assert text.index("first") < text.index("second")
    assert text.count("\n## ") == 2

def test_write_failure_is_swallowed(tmp_path: Path, capsys):
    # a directory where the file should be
    target = tmp_path / "api-logs.md"
    target.mkdir()
    MarkdownAuditLog(target).record(AuditEntry("info", "lost"))
    assert "Logging failed" in capsys.readouterr().err

def test_unencodable_message_is_swallowed(tmp_path: Path, capsys):
    MarkdownAuditLog(tmp_path / "api-logs.md").record(AuditEntry("error", "bad \ud800 text"))
    assert "Logging failed" in capsys.readouterr().err

def test_verbose_echoes_to_stderr(tmp_path: Path, capsys):
    MarkdownAuditLog(tmp_path / "api-logs.md", verbose=True).record(AuditEntry("info", "hello"))
    assert "[INFO] hello" in capsys.readouterr().err

def test_null_log():
    NullAuditLog().record(AuditEntry("info", "ignored"))
