"""
Knowledge ORM Models
====================

Two collections hold curated question/answer pairs:

- ``GoldenKnowledge`` (``golden_knowledge``): curator-approved entries,
  created by promoting a flagged message and maintained through admin CRUD.
  ``source_message_id`` is a weak back-reference: deleting or editing the
  source message never touches the entry.
- ``RagKnowledge`` (``rag_knowledge``): the search-optimized copy consumed by
  the knowledge tool process. It is deleted and rebuilt wholesale on every
  sync and has no update or delete path of its own. Each row keeps the id of
  the golden entry it was derived from, and `tag_text`: its tags joined by
  `TAG_SEPARATOR`, so a substring match against it can never span two tags.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, String, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from visakha_backend.database.config.connection_engine import declarativeBase
from visakha_backend.database.helpers.documents import utcnow

TAG_SEPARATOR = "\x1f"


class GoldenKnowledge(declarativeBase):
    """
    ORM model for the `golden_knowledge` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    question, answer : str
        The normalized pair.
    tags : list[str]
        Category labels.
    source_message_id : UUID | None
        Message the entry was promoted from (weak reference).
    created_by : str | None
        Email of the curator.
    """

    __tablename__ = "golden_knowledge"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    question: Mapped[str] = mapped_column(TEXT, nullable=False)
    answer: Mapped[str] = mapped_column(TEXT, nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    source_message_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    """Weak reference to `messages.id`; never cascades."""

    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def search_text(self) -> str:
        """`question + " " + answer + " " + tags joined by spaces`."""
        return f"{self.question} {self.answer} {' '.join(self.tags or [])}"

    def __str__(self) -> str:
        return f"GoldenKnowledge: id:{self.id}, question: {self.question}"


class RagKnowledge(declarativeBase):
    """
    ORM model for the `rag_knowledge` table: a derived copy of
    `GoldenKnowledge` plus `synced_at` and the computed `search_text`.
    """

    __tablename__ = "rag_knowledge"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    """Id of the golden entry this row was derived from."""

    question: Mapped[str] = mapped_column(TEXT, nullable=False)
    answer: Mapped[str] = mapped_column(TEXT, nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    source_message_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    synced_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    search_text: Mapped[str] = mapped_column(TEXT, nullable=False)
    tag_text: Mapped[str] = mapped_column(TEXT, nullable=False, default="")

    @classmethod
    def from_golden(cls, entry: GoldenKnowledge, synced_at: datetime) -> "RagKnowledge":
        return cls(
            id=entry.id,
            question=entry.question,
            answer=entry.answer,
            tags=list(entry.tags or []),
            source_message_id=entry.source_message_id,
            created_by=entry.created_by,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            synced_at=synced_at,
            search_text=entry.search_text(),
            tag_text=TAG_SEPARATOR.join(entry.tags or []),
        )
