"""Shared fixtures for the admin backend tests."""

from __future__ import annotations

import os

# Settings are read at import time.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BOOTSTRAP_ADMIN_EMAIL", "root@visakha.test")
os.environ.setdefault("FRONTEND_DIST_DIR", "/nonexistent/web/dist")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from visakha_backend.api.utils import issue_session_token
from visakha_backend.database.config.config import settings
from visakha_backend.database.config.connection_engine import StoreClient
from visakha_backend.database.entities import Conversation, GoldenKnowledge, Message, User
from visakha_backend.main import create_app


class Seeder:
    """Writes documents straight into the store, with a monotonic test clock."""

    def __init__(self, store: StoreClient):
        self.store = store
        self.clock = datetime(2025, 1, 1, 9, 0, 0)

    def tick(self, minutes: int = 1) -> datetime:
        self.clock = self.clock + timedelta(minutes=minutes)
        return self.clock

    def add(self, *documents):
        with self.store.session() as session:
            session.add_all(documents)
            session.commit()
        return documents[0] if len(documents) == 1 else documents

    def user(self, name: str = "Ada Lovelace", username: str = "ada", email: str = "ada@example.com") -> User:
        return self.add(User(id=uuid.uuid4(), name=name, username=username, email=email))

    def conversation(
        self,
        key: str,
        title: Optional[str] = "A conversation",
        resolved: Optional[bool] = False,
        created_at: Optional[datetime] = None,
    ) -> Conversation:
        created_at = created_at or self.tick()
        return self.add(
            Conversation(
                id=uuid.uuid4(),
                conversation_id=key,
                title=title,
                resolved=resolved,
                created_at=created_at,
                updated_at=created_at,
                messages=[],
            )
        )

    def message(
        self,
        conversation_key: str,
        sender: str = "User",
        text: Optional[str] = None,
        content: Any = None,
        feedback: Optional[Dict[str, Any]] = None,
        user: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        member: bool = True,
    ) -> Message:
        """Insert a message and, unless `member=False`, append it to its conversation."""
        created_at = created_at or self.tick()
        message = Message(
            id=uuid.uuid4(),
            conversation_id=conversation_key,
            sender=sender,
            text=text,
            content=content,
            feedback=feedback,
            user=user,
            model="gpt-test" if sender != "User" else None,
            created_at=created_at,
            updated_at=updated_at or created_at,
        )
        with self.store.session() as session:
            session.add(message)
            if member:
                conversation = (
                    session.query(Conversation).filter(Conversation.conversation_id == conversation_key).one_or_none()
                )
                if conversation is not None:
                    conversation.messages = list(conversation.messages or []) + [str(message.id)]
            session.commit()
        return message

    def golden(self, question: str, answer: str, tags: Optional[List[str]] = None) -> GoldenKnowledge:
        at = self.tick()
        return self.add(
            GoldenKnowledge(
                id=uuid.uuid4(),
                question=question,
                answer=answer,
                tags=tags or [],
                created_by="curator@visakha.test",
                created_at=at,
                updated_at=at,
            )
        )


@pytest.fixture
def store() -> StoreClient:
    """In-memory SQLite store shared by every connection of the test."""
    client = StoreClient(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    client.connect()
    yield client
    client.close()


@pytest.fixture
def seed(store: StoreClient) -> Seeder:
    return Seeder(store)


@pytest.fixture
def app(store: StoreClient) -> FastAPI:
    return create_app(store)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """TestClient with the lifespan running (store connected, bootstrap admin seeded)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_email() -> str:
    return settings.BOOTSTRAP_ADMIN_EMAIL


@pytest.fixture
def admin_headers(admin_email: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_session_token(admin_email, 'super_admin')}"}


@pytest.fixture
def moderator_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_session_token('mod@visakha.test', 'moderator')}"}
