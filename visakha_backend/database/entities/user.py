"""
User ORM Model
==============

The ``User`` ORM model represents an end user of the chatbot. Messages refer to
users by the string form of ``id``; the admin dashboard only ever reads the
reduced projection ``{id, name, username, email}``.
"""

import uuid
from typing import Optional

from sqlalchemy import VARCHAR, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from visakha_backend.database.config.connection_engine import declarativeBase


class User(declarativeBase):
    """
    ORM model for the `users` table.

    Attributes
    ----------
    id : UUID
        Primary key. Unique identifier for the user.
    name : str | None
        Display name.
    username : str | None
        Login handle.
    email : str | None
        Email address of the user.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    """Primary key. UUID of the user."""

    name: Mapped[Optional[str]] = mapped_column(VARCHAR(255), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(VARCHAR(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(VARCHAR(255), nullable=True)

    def __str__(self) -> str:
        return f"User: id:{self.id}, username: {self.username}, email:{self.email}"
