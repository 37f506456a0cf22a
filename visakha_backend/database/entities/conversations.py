"""
Conversation ORM Model
=======================

The ``Conversation`` ORM model represents a chatbot conversation stored in the
``conversations`` collection. It is implemented with SQLAlchemy 2.0-style
typing.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- String correlation key (``conversation_id``) shared with ``messages``; this
  is what feedback messages are grouped and joined on, not the primary key
- Membership list (``messages``): JSON array of message id strings, the
  authoritative set of messages the admin UI displays
- ``resolved`` flag, changed only by the explicit toggle endpoint

Integration notes
~~~~~~~~~~~~~~~~~
- Conversations are created by the chatbot ingestion path; this service only
  reads them, toggles ``resolved`` and exposes generic admin CRUD.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, String, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from visakha_backend.database.config.connection_engine import declarativeBase
from visakha_backend.database.helpers.documents import utcnow


class Conversation(declarativeBase):
    """
    ORM model for the `conversations` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    conversation_id : str
        Correlation key joined against `Message.conversation_id`.
    title : str | None
        Human-readable title.
    created_at, updated_at : datetime
        Timestamps (UTC).
    resolved : bool | None
        Triage state; absent/None reads as unresolved.
    messages : list[str]
        Ids of the member messages.
    """

    __tablename__ = "conversations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    """Primary key. UUID of the conversation."""

    conversation_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    """Correlation key shared with the messages of this conversation."""

    title: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    resolved: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=False)
    """Set only through the resolved toggle, never inferred from feedback."""

    messages: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    """Membership list: ids of the messages belonging to this conversation."""

    def __str__(self) -> str:
        return f"Conversation: conversationId:{self.conversation_id}, title: {self.title}, resolved: {self.resolved}"
