"""Tests for the feedback inbox: listing, detail and the resolved toggle."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from visakha_backend.database.entities import Conversation, Message

THUMBS_DOWN = {"rating": "thumbsDown", "text": "wrong answer"}
THUMBS_UP = {"rating": "thumbsUp"}


def flagged_conversation(seed, key: str, feedback=THUMBS_DOWN):
    """Conversation with a User question and a flagged Model answer."""
    seed.conversation(key, title=f"Conversation {key}")
    question = seed.message(key, sender="User", text=f"question {key}")
    answer = seed.message(key, sender="Model", content=f"answer {key}", feedback=feedback)
    return question, answer


class TestListFeedbackConversations:
    """GET /feedback-conversations"""

    def test_empty_feedback(self, client: TestClient, seed) -> None:
        seed.conversation("c0")
        seed.message("c0", sender="User", text="hello")

        body = client.get("/feedback-conversations").json()

        assert body["data"] == []
        assert body["total"] == 0
        assert body["totalPages"] == 0
        assert body["count"] == 0
        assert body["page"] == 1
        assert body["limit"] == 10

    def test_single_flagged_message(self, client: TestClient, seed) -> None:
        seed.conversation("c1")
        seed.message("c1", sender="User", text="hi", feedback={"rating": "thumbsDown"})

        body = client.get("/feedback-conversations").json()

        assert body["total"] == 1
        assert len(body["data"]) == 1
        assert body["data"][0]["conversationId"] == "c1"
        assert body["data"][0]["messages"][0]["text"] == "hi"

    def test_only_conversations_with_feedback_are_listed(self, client: TestClient, seed) -> None:
        flagged_conversation(seed, "flagged")
        seed.conversation("quiet")
        seed.message("quiet", sender="User", text="no feedback here")

        body = client.get("/feedback-conversations").json()

        assert [item["conversationId"] for item in body["data"]] == ["flagged"]
        for item in body["data"]:
            assert any(message["feedback"] is not None for message in item["messages"])

    def test_messages_follow_membership_in_chronological_order(self, client: TestClient, seed) -> None:
        seed.conversation("c1")
        later = seed.clock.replace(hour=12)
        earlier = seed.clock.replace(hour=10)
        second = seed.message("c1", sender="Model", content="second", feedback=THUMBS_DOWN, created_at=later)
        first = seed.message("c1", sender="User", text="first", created_at=earlier)
        # Same correlation key but not in the membership list.
        seed.message("c1", sender="User", text="stray", member=False)

        item = client.get("/feedback-conversations").json()["data"][0]

        assert [message["messageId"] for message in item["messages"]] == [str(first.id), str(second.id)]

    def test_text_and_content_are_mutually_exclusive(self, client: TestClient, seed) -> None:
        seed.conversation("c1")
        seed.message("c1", sender="User", text="question", content="ignored")
        seed.message(
            "c1",
            sender="Model",
            text="ignored",
            content=[{"type": "think", "think": "hmm"}, {"type": "text", "text": "answer"}],
            feedback=THUMBS_DOWN,
        )

        messages = client.get("/feedback-conversations").json()["data"][0]["messages"]

        user_message, model_message = messages
        assert user_message["text"] == "question"
        assert user_message["content"] is None
        assert model_message["text"] is None
        assert model_message["content"][1] == {"type": "text", "text": "answer"}

    def test_user_messages_resolve_their_author(self, client: TestClient, seed) -> None:
        author = seed.user()
        seed.conversation("c1")
        seed.message("c1", sender="User", text="known author", user=str(author.id))
        seed.message("c1", sender="User", text="unknown author", user=str(uuid.uuid4()))
        seed.message("c1", sender="User", text="garbage ref", user="not-an-id")
        seed.message("c1", sender="Model", content="answer", user=str(author.id), feedback=THUMBS_DOWN)

        messages = client.get("/feedback-conversations").json()["data"][0]["messages"]

        assert messages[0]["user"] == {
            "id": str(author.id),
            "name": "Ada Lovelace",
            "username": "ada",
            "email": "ada@example.com",
        }
        assert messages[1]["user"] is None
        assert messages[2]["user"] is None
        assert messages[3]["user"] is None

    def test_missing_member_messages_are_skipped(self, client: TestClient, seed, store) -> None:
        seed.conversation("c1")
        seed.message("c1", sender="Model", content="answer", feedback=THUMBS_DOWN)
        with store.session() as session:
            conversation = session.query(Conversation).filter_by(conversation_id="c1").one()
            conversation.messages = conversation.messages + [str(uuid.uuid4()), "not-an-id"]
            session.commit()

        item = client.get("/feedback-conversations").json()["data"][0]

        assert len(item["messages"]) == 1

    def test_ordered_by_latest_feedback_and_paginated(self, client: TestClient, seed) -> None:
        for key in ["a", "b", "c", "d", "e"]:
            flagged_conversation(seed, key)
        # Touch "b" last so it becomes the most recent.
        seed.message("b", sender="Model", content="late answer", feedback=THUMBS_UP)

        full = client.get("/feedback-conversations", params={"limit": 10}).json()
        page_two = client.get("/feedback-conversations", params={"page": 2, "limit": 2}).json()

        ordering = [item["conversationId"] for item in full["data"]]
        assert ordering == ["b", "e", "d", "c", "a"]
        assert [item["conversationId"] for item in page_two["data"]] == ordering[2:4]
        assert page_two["total"] == 5
        assert page_two["totalPages"] == 3
        assert page_two["count"] == 2

    def test_ties_break_on_conversation_key(self, client: TestClient, seed) -> None:
        at = seed.tick()
        for key in ["z", "m", "a"]:
            seed.conversation(key)
            seed.message(key, sender="Model", content="x", feedback=THUMBS_DOWN, created_at=at, updated_at=at)

        ordering = [item["conversationId"] for item in client.get("/feedback-conversations").json()["data"]]

        assert ordering == ["a", "m", "z"]

    def test_latest_feedback_date_is_max_of_feedback_messages(self, client: TestClient, seed) -> None:
        seed.conversation("c1")
        seed.message("c1", sender="Model", content="one", feedback=THUMBS_DOWN)
        last = seed.message("c1", sender="Model", content="two", feedback=THUMBS_UP)
        seed.message("c1", sender="User", text="no feedback, newest")

        item = client.get("/feedback-conversations").json()["data"][0]

        assert item["latestFeedbackDate"].startswith(last.updated_at.isoformat()[:19])

    def test_orphan_feedback_counts_in_total_but_not_in_data(self, client: TestClient, seed) -> None:
        flagged_conversation(seed, "real")
        seed.message("ghost", sender="Model", content="orphan", feedback=THUMBS_DOWN)

        body = client.get("/feedback-conversations").json()

        assert body["total"] == 2
        assert [item["conversationId"] for item in body["data"]] == ["real"]

    def test_junk_pagination_values_fall_back(self, client: TestClient, seed) -> None:
        flagged_conversation(seed, "c1")

        body = client.get("/feedback-conversations", params={"page": "abc", "limit": "-3"}).json()

        assert body["page"] == 1
        assert body["limit"] == 10
        assert len(body["data"]) == 1

    def test_null_resolved_reads_as_false(self, client: TestClient, seed) -> None:
        seed.conversation("c1", resolved=None)
        seed.message("c1", sender="Model", content="x", feedback=THUMBS_DOWN)

        assert client.get("/feedback-conversations").json()["data"][0]["resolved"] is False


class TestGetFeedbackConversation:
    """GET /feedback-conversations/{conversationId}"""

    def test_detail(self, client: TestClient, seed) -> None:
        question, answer = flagged_conversation(seed, "c1")

        response = client.get("/feedback-conversations/c1")

        assert response.status_code == 200
        body = response.json()
        assert body["conversationId"] == "c1"
        assert body["title"] == "Conversation c1"
        assert [message["messageId"] for message in body["messages"]] == [str(question.id), str(answer.id)]
        assert body["messages"][1]["feedback"] == THUMBS_DOWN

    def test_conversation_without_feedback_is_not_found(self, client: TestClient, seed) -> None:
        seed.conversation("quiet")
        seed.message("quiet", sender="User", text="hello")

        response = client.get("/feedback-conversations/quiet")

        assert response.status_code == 404
        assert response.json() == {"error": "Conversation not found"}

    def test_unknown_conversation_is_not_found(self, client: TestClient) -> None:
        assert client.get("/feedback-conversations/nope").status_code == 404

    def test_orphan_feedback_is_not_found(self, client: TestClient, seed) -> None:
        seed.message("ghost", sender="Model", content="orphan", feedback=THUMBS_DOWN)

        assert client.get("/feedback-conversations/ghost").status_code == 404


class TestSetResolved:
    """PATCH /feedback-conversations/{conversationId}/resolved"""

    def test_toggle_is_idempotent(self, client: TestClient, seed) -> None:
        flagged_conversation(seed, "c1")

        first = client.patch("/feedback-conversations/c1/resolved", json={"resolved": True})
        second = client.patch("/feedback-conversations/c1/resolved", json={"resolved": True})

        assert first.status_code == 200
        assert second.json() == {"success": True, "conversationId": "c1", "resolved": True}
        assert client.get("/feedback-conversations/c1").json()["resolved"] is True

    def test_reopen(self, client: TestClient, seed) -> None:
        seed.conversation("c1", resolved=True)

        response = client.patch("/feedback-conversations/c1/resolved", json={"resolved": False})

        assert response.json()["resolved"] is False

    def test_unknown_conversation(self, client: TestClient, seed, store) -> None:
        seed.conversation("c1")

        response = client.patch("/feedback-conversations/missing/resolved", json={"resolved": True})

        assert response.status_code == 404
        with store.session() as session:
            assert session.query(Conversation).filter_by(conversation_id="c1").one().resolved is False

    def test_non_boolean_is_rejected(self, client: TestClient, seed, store) -> None:
        seed.conversation("c1")

        for value in ["true", 1, None]:
            response = client.patch("/feedback-conversations/c1/resolved", json={"resolved": value})
            assert response.status_code == 400
            assert response.json()["error"] == "Invalid request"

        with store.session() as session:
            assert session.query(Conversation).filter_by(conversation_id="c1").one().resolved is False

    def test_does_not_touch_timestamps_or_messages(self, client: TestClient, seed, store) -> None:
        _, answer = flagged_conversation(seed, "c1")
        with store.session() as session:
            before = session.query(Conversation).filter_by(conversation_id="c1").one().updated_at

        client.patch("/feedback-conversations/c1/resolved", json={"resolved": True})

        with store.session() as session:
            assert session.query(Conversation).filter_by(conversation_id="c1").one().updated_at == before
            assert session.get(Message, answer.id).updated_at == answer.updated_at
