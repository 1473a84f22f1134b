"""Shared fixtures: a scripted stand-in for requests.Session and a recording notifier."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import requests

from bee_sync.audit import MemoryAuditLog
from bee_sync.config import SyncConfig


class FakeResponse:
    def __init__(self, body=None, status_code: int = 200, text: str | None = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Returns queued responses in order and records every call."""

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def get(self, url, headers=None, params=None, **kwargs):
        self.calls.append({"url": url, "headers": dict(headers or {}), "params": dict(params or {})})
        if not self.responses:
            raise AssertionError(f"unexpected request to {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingNotifier:
    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


def page(records, current, total):
    return FakeResponse({"data": records, "meta": {"currentPage": current, "totalPages": total}})

def cursor_page(records, next_cursor):
    return FakeResponse({"data": {"lifelogs": records}, "meta": {"lifelogs": {"nextCursor": next_cursor, "count": len(records)}}})


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()

@pytest.fixture
def audit_log() -> MemoryAuditLog:
    return MemoryAuditLog()

@pytest.fixture
def config(tmp_path: Path) -> SyncConfig:
    return SyncConfig(
        api_key="test-key",
        folder=tmp_path / "Bee Daily",
        start_date="2025-02-09",
        base_url="https://api.example.test",
    )
