"""
Faq ORM Model
=============

Frequently asked questions shown by the chatbot. Stored in the ``questions``
table and exposed to the admin surface as the ``faqs`` collection.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from visakha_backend.database.config.connection_engine import declarativeBase
from visakha_backend.database.helpers.documents import utcnow


class Faq(declarativeBase):
    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    question: Mapped[str] = mapped_column(TEXT, nullable=False)
    answer: Mapped[str] = mapped_column(TEXT, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __str__(self) -> str:
        return f"Faq: id:{self.id}, question: {self.question}"
