"""Tests for markdown rendering."""

from datetime import datetime, timezone

from bee_sync.models import Conversation, Lifelog
from bee_sync.render import format_time, render_conversations, render_daily_log, render_lifelog


def test_format_time():
    assert format_time(datetime(2025, 2, 9, 14, 3, tzinfo=timezone.utc)) == "02/09/25, 2:03 PM"
    assert format_time(datetime(2025, 2, 9, 0, 5, tzinfo=timezone.utc)) == "02/09/25, 12:05 AM"


class TestLifelog:
    def test_markdown_wins(self):
        lg = Lifelog.from_api({
            "id": "1", "startTime": "2025-02-09T14:00:00Z", "markdown": "# Server side\n",
            "contents": [{"type": "blockquote", "content": "ignored"}],
        })
        assert render_lifelog(lg) == "# Server side"

    def test_from_contents(self):
        lg = Lifelog.from_api({
            "id": "1",
            "startTime": "2025-02-09T14:00:00Z",
            "contents": [
                {"type": "heading1", "content": "Standup"},
                {"type": "heading2", "content": "Updates"},
                {"type": "blockquote", "content": "Shipped it", "speakerName": "Ann", "startTime": "2025-02-09T14:03:00Z"},
                {"type": "blockquote", "content": "Nice"},
                {"type": "heading2", "content": "Empty section"},
            ],
        })
        assert render_lifelog(lg) == (
            "## Standup\n\n"
            "### Updates\n\n"
            "- Ann (02/09/25, 2:03 PM): Shipped it\n"
            "- Speaker: Nice"
        )

    def test_messages_outside_sections(self):
        lg = Lifelog.from_api({
            "id": "1", "title": "Chat", "startTime": "2025-02-09T14:00:00Z",
            "contents": [
                {"type": "blockquote", "content": "one", "speakerName": "A"},
                {"type": "blockquote", "content": "two", "speakerName": "B"},
                {"type": "heading3", "content": "A note"},
            ],
        })
        assert render_lifelog(lg) == "## Chat\n\n- A: one\n- B: two\n\nA note"


def test_daily_log_joins_in_fetch_order():
    logs = [
        Lifelog.from_api({"id": "2", "startTime": "2025-02-09T18:00:00Z", "markdown": "second"}),
        Lifelog.from_api({"id": "1", "startTime": "2025-02-09T09:00:00Z", "markdown": "first"}),
    ]
    assert render_daily_log("2025-02-09", logs) == "# 2025-02-09\n\nsecond\n\nfirst\n"


def test_conversations():
    conv = Conversation.from_api({
        "id": 7,
        "created_at": "2025-02-09T08:30:00Z",
        "summary": "Planning the week",
        "messages": [{"role": "user", "content": "What's first?"}, {"role": "assistant", "content": "Email."}],
    })
    assert render_conversations("2025-02-09", [conv]) == (
        "# Conversations 2025-02-09\n\n"
        "## Conversation 7\n\n"
        "*Started 02/09/25, 8:30 AM UTC*\n\n"
        "Planning the week\n\n"
        "- **user**: What's first?\n"
        "- **assistant**: Email.\n"
    )
