"""Markdown rendering for one date's worth of records."""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Sequence

from .models import ContentNode, Conversation, Lifelog


def format_time(dt: datetime) -> str:
    """02/09/25, 2:03 PM"""
    hour = dt.strftime("%I").lstrip("0") or "12"
    return f"{dt:%m/%d/%y}, {hour}:{dt:%M} {dt:%p}"

def _walk(nodes: Iterable[ContentNode]) -> Iterator[ContentNode]:
    for node in nodes:
        yield node
        yield from _walk(node.children)

def _message_line(node: ContentNode) -> str:
    speaker = node.speaker_name or "Speaker"
    stamp = f" ({format_time(node.start_time)})" if node.start_time else ""
    return f"- {speaker}{stamp}: {node.content}"


def render_lifelog(lifelog: Lifelog) -> str:
    # Server-rendered markdown takes precedence over rebuilding it from nodes.
    if lifelog.markdown:
        return lifelog.markdown.strip()

    blocks: List[str] = []
    title = lifelog.title
    section: Optional[str] = None
    section_lines: List[str] = []
    loose_lines: List[str] = []

    def flush_loose():
        if loose_lines:
            blocks.append("\n".join(loose_lines))
            loose_lines.clear()

    def flush_section():
        if section and section_lines:
            blocks.append(f"### {section}\n\n" + "\n".join(section_lines))
        section_lines.clear()

    for node in _walk(lifelog.contents):
        if node.type == "heading1":
            if not title:
                title = node.content
        elif node.type == "heading2":
            flush_loose()
            flush_section()
            section = node.content
        elif node.type == "blockquote":
            (section_lines if section else loose_lines).append(_message_line(node))
        elif node.content:
            flush_loose()
            blocks.append(node.content)
    flush_loose()
    flush_section()

    if title:
        blocks.insert(0, f"## {title}")
    return "\n\n".join(blocks)


def render_daily_log(day: str, lifelogs: Sequence[Lifelog]) -> str:
    parts = [f"# {day}"] + [render_lifelog(lg) for lg in lifelogs]
    return "\n\n".join(p for p in parts if p) + "\n"


def render_conversation(conversation: Conversation) -> str:
    lines = [f"## Conversation {conversation.id or 'unknown'}", ""]
    lines.append(f"*Started {format_time(conversation.start_time)} UTC*")
    summary = conversation.summary or conversation.short_summary
    if summary:
        lines += ["", summary.strip()]
    if conversation.messages:
        lines.append("")
        lines += [f"- **{m.role}**: {m.content}" for m in conversation.messages]
    return "\n".join(lines)

def render_conversations(day: str, conversations: Sequence[Conversation]) -> str:
    parts = [f"# Conversations {day}"] + [render_conversation(c) for c in conversations]
    return "\n\n".join(parts) + "\n"
