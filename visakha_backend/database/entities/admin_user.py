"""
AdminUser ORM Model
===================

Authorization records for dashboard operators. A Google identity may sign in
only if its email has a row here; the row's ``role`` decides which routes are
open to it.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, VARCHAR, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from visakha_backend.database.config.connection_engine import declarativeBase
from visakha_backend.database.helpers.documents import utcnow

SUPER_ADMIN = "super_admin"
MODERATOR = "moderator"
ROLES = (MODERATOR, SUPER_ADMIN)


class AdminUser(declarativeBase):
    """
    ORM model for the `admin_users` table.

    Attributes
    ----------
    email : str
        Identity the record authorizes (unique).
    role : str
        "super_admin" or "moderator".
    added_by : str | None
        Email of the operator who added the member, or "system" for the
        bootstrap administrator.
    """

    __tablename__ = "admin_users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(VARCHAR(255), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(VARCHAR(32), nullable=False, default=MODERATOR)
    added_by: Mapped[Optional[str]] = mapped_column(VARCHAR(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __str__(self) -> str:
        return f"AdminUser: email:{self.email}, role: {self.role}"
