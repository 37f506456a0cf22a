"""
User DAO

Purpose
-------
Thin data-access layer for the `User` entity. The dashboard never writes
users through this DAO (the generic collection CRUD does that); it only
resolves message authors and counts users for the statistics page.
"""

import logging
import uuid
from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from visakha_backend.database.entities.user import User

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for User entities.
    """

    def fetchUsersByIds(self, session: Session, ids: Iterable[uuid.UUID]) -> List[User]:
        """
        Fetch users whose primary key is in `ids`.

        Returns
        -------
        list[User]
            Matching users; ids without a user are absent.
        """
        ids = list(ids)
        if not ids:
            return []
        try:
            return session.query(User).filter(User.id.in_(ids)).all()
        except Exception as e:
            logger.error("Error in UserDao.fetchUsersByIds. Error Message: %s", e)
            raise

    def countUsers(self, session: Session) -> int:
        try:
            return session.query(func.count(User.id)).scalar() or 0
        except Exception as e:
            logger.error("Error in UserDao.countUsers. Error Message: %s", e)
            raise
