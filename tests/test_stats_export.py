"""Tests for dashboard statistics and the Markdown export."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from visakha_backend.api.markdown_export import render_content, render_export
from visakha_backend.api.models import FeedbackConversation, FeedbackMessage


class TestStats:
    """GET /admin/stats"""

    def test_totals_and_timeline(self, client: TestClient, admin_headers, seed) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        seed.user()
        seed.conversation("c1")
        seed.message("c1", sender="User", text="today", created_at=now)
        seed.message("c1", sender="User", text="yesterday", created_at=now - timedelta(days=1))
        seed.message("c1", sender="User", text="ancient", created_at=now - timedelta(days=45))
        seed.message("c1", sender="Model", content="up", feedback={"rating": "thumbsUp"}, created_at=now)
        seed.message("c1", sender="Model", content="down", feedback={"rating": "thumbsDown"}, created_at=now)
        seed.message("c1", sender="Model", content="legacy", feedback={"rating": 0}, created_at=now)

        response = client.get("/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["totals"] == {
            "users": 1,
            "conversations": 1,
            "messages": 6,
            "thumbsUp": 1,
            "thumbsDown": 2,
        }
        assert body["questionsTimeline"] == [
            {"date": (now - timedelta(days=1)).strftime("%Y-%m-%d"), "count": 1},
            {"date": now.strftime("%Y-%m-%d"), "count": 1},
        ]

    def test_empty_store(self, client: TestClient, admin_headers) -> None:
        body = client.get("/admin/stats", headers=admin_headers).json()

        assert body["totals"]["messages"] == 0
        assert body["questionsTimeline"] == []


class TestExport:
    """GET /conversations/export"""

    def test_download(self, client: TestClient, seed) -> None:
        seed.conversation("c1", title="Refunds", resolved=True)
        seed.message("c1", sender="User", text="Can I get a refund?")
        seed.message(
            "c1",
            sender="Model",
            content=[
                {"type": "think", "think": "check policy"},
                {"type": "tool_call", "tool_call": {"name": "search_golden_knowledge", "args": {"query": "refund"}}},
                {"type": "text", "text": "Yes, within 30 days."},
            ],
            feedback={"rating": "thumbsDown", "text": "too vague"},
        )
        seed.conversation("c2", title="No feedback")
        seed.message("c2", sender="User", text="hello")

        response = client.get("/conversations/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/markdown")
        assert response.headers["content-disposition"] == 'attachment; filename="conversations.md"'
        text = response.text
        assert text.startswith("# All Conversations Export\n\n")
        assert "Total Conversations: 1\n" in text
        assert "## Refunds\n" in text
        assert "**ID:** c1\n" in text
        assert "**Status:** Resolved\n" in text
        assert "👤 **User**" in text
        assert "Can I get a refund?" in text
        assert "> *Thinking:*\n> check policy\n" in text
        assert "`search_golden_knowledge`" in text
        assert "Yes, within 30 days.\n" in text
        assert "> **Feedback:** thumbsDown - too vague\n" in text
        assert "No feedback" not in text

    def test_newest_conversation_first(self, client: TestClient, seed) -> None:
        for key in ["older", "newer"]:
            seed.conversation(key, title=key)
            seed.message(key, sender="Model", content="x", feedback={"rating": "thumbsUp"})

        text = client.get("/conversations/export").text

        assert text.index("## newer") < text.index("## older")


class TestMarkdownRendering:
    def test_untitled_conversation_without_messages(self) -> None:
        conversation = FeedbackConversation(id="1", conversation_id="c9", title=None, resolved=False, messages=[])

        text = render_export([conversation], datetime(2025, 1, 1))

        assert "## Untitled Conversation\n" in text
        assert "**Status:** Open\n" in text
        assert "*No messages in this conversation.*" in text

    def test_string_content_and_unknown_blocks(self) -> None:
        assert render_content("plain") == "plain\n\n"
        assert render_content([{"type": "image", "url": "x"}, {"type": "text", "text": "kept"}]) == "kept\n\n"

    def test_feedback_without_comment(self) -> None:
        message = FeedbackMessage(message_id="m", sender="Model", content="x", feedback={"rating": "thumbsUp"})
        conversation = FeedbackConversation(id="1", conversation_id="c", messages=[message])

        assert "> **Feedback:** thumbsUp\n" in render_export([conversation], datetime(2025, 1, 1))
