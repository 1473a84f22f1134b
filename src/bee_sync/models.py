"""Immutable record types built from API JSON."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple

from .errors import FormatError

# First present key wins.
TIMESTAMP_KEYS = ("startTime", "start_time", "createdAt", "created_at", "timestamp", "date")


def parse_timestamp(value: Any) -> datetime:
    """ISO-8601 string -> aware UTC datetime. Naive values are taken to be UTC."""
    if not isinstance(value, str) or not value:
        raise FormatError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        raise FormatError(f"Invalid timestamp: {value!r}")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def _optional_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return parse_timestamp(value)

def record_timestamp(raw: Dict[str,Any]) -> datetime:
    for key in TIMESTAMP_KEYS:
        if raw.get(key):
            return parse_timestamp(raw[key])
    raise FormatError(f"Record {raw.get('id', '?')!r} has no timestamp")

def _require_mapping(raw: Any, what: str) -> Dict[str,Any]:
    if not isinstance(raw, dict):
        raise FormatError(f"Invalid {what}: expected an object, got {type(raw).__name__}")
    return raw

def _as_list(raw: Dict[str,Any], key: str) -> list:
    value = raw.get(key) or []
    if not isinstance(value, list):
        raise FormatError(f"Invalid '{key}': expected a list")
    return value


# ── Lifelogs ────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ContentNode:
    type: str
    content: str = ""
    start_time: Optional[datetime] = None
    speaker_name: Optional[str] = None
    speaker_identifier: Optional[str] = None
    children: Tuple["ContentNode", ...] = ()

    @classmethod
    def from_api(cls, raw: Dict[str,Any]) -> "ContentNode":
        raw = _require_mapping(raw, "content node")
        return cls(
            type=str(raw.get("type") or ""),
            content=str(raw.get("content") or ""),
            start_time=_optional_timestamp(raw.get("startTime")),
            speaker_name=raw.get("speakerName"),
            speaker_identifier=raw.get("speakerIdentifier"),
            children=tuple(cls.from_api(c) for c in _as_list(raw, "children")),
        )

@dataclass(frozen=True)
class Lifelog:
    id: str
    start_time: datetime
    title: str = ""
    markdown: str = ""
    end_time: Optional[datetime] = None
    contents: Tuple[ContentNode, ...] = ()

    @classmethod
    def from_api(cls, raw: Dict[str,Any]) -> "Lifelog":
        raw = _require_mapping(raw, "lifelog")
        return cls(
            id=str(raw.get("id") or ""),
            start_time=record_timestamp(raw),
            title=str(raw.get("title") or ""),
            markdown=str(raw.get("markdown") or ""),
            end_time=_optional_timestamp(raw.get("endTime")),
            contents=tuple(ContentNode.from_api(n) for n in _as_list(raw, "contents")),
        )


# ── Conversations ───────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Message:
    role: str
    content: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_api(cls, raw: Dict[str,Any]) -> "Message":
        raw = _require_mapping(raw, "message")
        role = raw.get("role") or raw.get("speaker") or raw.get("speakerName") or "unknown"
        content = raw.get("content") if raw.get("content") is not None else raw.get("text", "")
        ts = raw.get("timestamp") or raw.get("created_at") or raw.get("startTime")
        return cls(role=str(role), content=str(content or ""), timestamp=_optional_timestamp(ts))

@dataclass(frozen=True)
class Conversation:
    id: str
    start_time: datetime
    summary: str = ""
    short_summary: str = ""
    end_time: Optional[datetime] = None
    messages: Tuple[Message, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, raw: Dict[str,Any]) -> "Conversation":
        raw = _require_mapping(raw, "conversation")
        messages = raw.get("messages")
        if messages is None:
            messages = raw.get("transcriptions") or []
        if not isinstance(messages, list):
            raise FormatError("Invalid 'messages': expected a list")
        return cls(
            id=str(raw.get("id") or ""),
            start_time=record_timestamp(raw),
            summary=str(raw.get("summary") or ""),
            short_summary=str(raw.get("short_summary") or raw.get("shortSummary") or ""),
            end_time=_optional_timestamp(raw.get("end_time") or raw.get("endTime")),
            messages=tuple(Message.from_api(m) for m in messages),
        )
