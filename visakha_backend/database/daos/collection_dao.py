"""
Collection DAO — generic CRUD over one entity class
===================================================

Backs the `/admin/db/{collection}` surface. One instance wraps one mapped
class; the allow-list of classes lives in the service layer.
"""

import logging
import uuid
from typing import Any, List, Optional

from sqlalchemy import asc, func
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class CollectionDao:
    """
    Data Access Object over an arbitrary mapped entity.

    Parameters
    ----------
    entity : type
        Declarative class (e.g. `User`, `Faq`).
    """

    def __init__(self, entity):
        self.entity = entity

    def fetchPage(self, session: Session, offset: int, limit: int) -> List[Any]:
        try:
            query = session.query(self.entity)
            if hasattr(self.entity, "created_at"):
                query = query.order_by(asc(self.entity.created_at))
            return query.order_by(asc(self.entity.id)).offset(offset).limit(limit).all()
        except Exception as e:
            logger.error("Error in CollectionDao.fetchPage (%s). Error Message: %s", self.entity.__tablename__, e)
            raise

    def countDocuments(self, session: Session) -> int:
        try:
            return session.query(func.count(self.entity.id)).scalar() or 0
        except Exception as e:
            logger.error("Error in CollectionDao.countDocuments (%s). Error Message: %s", self.entity.__tablename__, e)
            raise

    def fetchById(self, session: Session, document_id: uuid.UUID) -> Optional[Any]:
        try:
            return session.get(self.entity, document_id)
        except Exception as e:
            logger.error("Error in CollectionDao.fetchById (%s). Error Message: %s", self.entity.__tablename__, e)
            raise

    def createDocument(self, session: Session, document) -> Any:
        try:
            session.add(document)
            session.flush()
            return document
        except Exception as e:
            logger.error("Error in CollectionDao.createDocument (%s). Error Message: %s", self.entity.__tablename__, e)
            raise

    def deleteDocument(self, session: Session, document) -> None:
        try:
            session.delete(document)
        except Exception as e:
            logger.error("Error in CollectionDao.deleteDocument (%s). Error Message: %s", self.entity.__tablename__, e)
            raise
