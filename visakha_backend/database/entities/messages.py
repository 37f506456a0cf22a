"""
Message ORM Model
=================

The ``Message`` ORM model represents a single chat turn. Messages point at
their conversation through the ``conversation_id`` correlation key (not a
foreign key) and may carry end-user feedback.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- ``sender``: ``"User"`` or ``"Model"``
- Body: ``text`` for User messages, ``content`` for Model messages. ``content``
  is either a plain string or an ordered list of content blocks:
  ``{"type": "text", "text"}``, ``{"type": "think", "think"}``,
  ``{"type": "tool_call", "tool_call": {"name", "args"}}``
- ``user``: stringified ``users.id`` of the author (User messages only)
- ``feedback``: ``{"rating", "tag"?, "text"?}`` or NULL. A non-NULL value is
  the only signal that puts a message in the feedback/curation pipeline.

"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, String, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from visakha_backend.database.config.connection_engine import declarativeBase
from visakha_backend.database.helpers.documents import utcnow

USER_SENDER = "User"
MODEL_SENDER = "Model"


class Message(declarativeBase):
    """
    ORM model for the `messages` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    conversation_id : str
        Correlation key of the owning conversation.
    sender : str
        "User" or "Model".
    model : str | None
        Name of the generating model (Model messages).
    text : str | None
        Body of a User message.
    content : str | list[dict] | None
        Body of a Model message.
    user : str | None
        Stringified id of the authoring user (User messages).
    feedback : dict | None
        Feedback attached to the message, if any.
    """

    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    """Primary key. UUID of the message."""

    conversation_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    """Correlation key of the conversation (matches `Conversation.conversation_id`)."""

    sender: Mapped[str] = mapped_column(String(32), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    model: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    text: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    content: Mapped[Optional[Any]] = mapped_column(JSON(none_as_null=True), nullable=True)

    user: Mapped[Optional[str]] = mapped_column("user", String(64), nullable=True)
    """Stringified `users.id`; a reference, not a foreign key."""

    feedback: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON(none_as_null=True), nullable=True)
    """Feedback document; SQL NULL means the message carries no feedback."""

    def __str__(self) -> str:
        return (
            f"Message: id:{self.id}, "
            f"conversationId: {self.conversation_id}, "
            f"sender: {self.sender}, "
            f"time_created: {self.created_at}"
        )
