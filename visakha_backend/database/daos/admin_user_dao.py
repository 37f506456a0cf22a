"""
AdminUser DAO

Purpose
-------
Data-access layer for dashboard operators (`admin_users`):
- Lookup by email (authorization)
- List, add and remove team members
- Count administrators (bootstrap check)

Transaction Model
-----------------
- `createAdmin` adds to the session but does not commit; the caller owns the
  transaction.
"""

import logging
from typing import List, Optional

from sqlalchemy import asc, func
from sqlalchemy.orm import Session

from visakha_backend.database.entities.admin_user import AdminUser

logger = logging.getLogger(__name__)


class AdminUserDao:
    """
    Data Access Object (DAO) for AdminUser entities.
    """

    def fetchAdminByEmail(self, session: Session, email: str) -> Optional[AdminUser]:
        try:
            return session.query(AdminUser).filter(AdminUser.email == email).one_or_none()
        except Exception as e:
            logger.error("Error in AdminUserDao.fetchAdminByEmail. Error Message: %s", e)
            raise

    def fetchAdmins(self, session: Session) -> List[AdminUser]:
        try:
            return session.query(AdminUser).order_by(asc(AdminUser.created_at)).all()
        except Exception as e:
            logger.error("Error in AdminUserDao.fetchAdmins. Error Message: %s", e)
            raise

    def countAdmins(self, session: Session) -> int:
        try:
            return session.query(func.count(AdminUser.id)).scalar() or 0
        except Exception as e:
            logger.error("Error in AdminUserDao.countAdmins. Error Message: %s", e)
            raise

    def createAdmin(self, session: Session, admin_user: AdminUser) -> AdminUser:
        """
        Add a new `AdminUser` to the session.

        Raises
        ------
        Exception
            Propagates any SQLAlchemy error encountered during `session.add`.
        """
        try:
            session.add(admin_user)
            session.flush()
            return admin_user
        except Exception as e:
            logger.error("Error in AdminUserDao.createAdmin. Error Message: %s", e)
            raise

    def deleteAdminByEmail(self, session: Session, email: str) -> int:
        try:
            return session.query(AdminUser).filter(AdminUser.email == email).delete(synchronize_session=False)
        except Exception as e:
            logger.error("Error in AdminUserDao.deleteAdminByEmail. Error Message: %s", e)
            raise
