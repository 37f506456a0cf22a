"""
Team service: who may operate the dashboard and with which role.

The authorization store is the `admin_users` collection. Identity
verification and session tokens live in `visakha_backend.api.auth`; this
module only reads and writes authorization records.
"""

import logging
from typing import List, Optional

from visakha_backend.api.models import TeamMember, TeamMemberAdded
from visakha_backend.database.config.config import settings
from visakha_backend.database.core.errors import InvalidRequestError, NotFoundError
from visakha_backend.database.daos.admin_user_dao import AdminUserDao
from visakha_backend.database.entities.admin_user import MODERATOR, ROLES, SUPER_ADMIN, AdminUser
from visakha_backend.database.helpers.documents import utcnow
from visakha_backend.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Trimmed, lowercased email; None when blank. Admin records are keyed by this form."""
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


class TeamService:
    def __init__(self, store):
        self.store = store
        self.admin_dao = AdminUserDao()

    @transactional
    def lookup_authorization(self, email: str, session=None) -> Optional[str]:
        """Role granted to `email`, or None when the identity is not authorized."""
        admin = self.admin_dao.fetchAdminByEmail(session, normalize_email(email))
        return admin.role if admin else None

    @transactional
    def ensure_bootstrap_admin(self, email: Optional[str] = None, session=None) -> bool:
        """
        Seed the configured super admin when no administrator exists yet.

        Returns True when a record was inserted.
        """
        email = normalize_email(email or settings.BOOTSTRAP_ADMIN_EMAIL)
        if not email or self.admin_dao.countAdmins(session) > 0:
            return False
        self.admin_dao.createAdmin(
            session, AdminUser(email=email, role=SUPER_ADMIN, added_by=SYSTEM_ACTOR, created_at=utcnow())
        )
        logger.info("Bootstrap super admin %s created", email)
        return True

    @transactional
    def ensure_admin(self, email: str, session=None) -> str:
        """Role of `email`, provisioning it as super admin if absent. Used by dev login."""
        email = normalize_email(email)
        admin = self.admin_dao.fetchAdminByEmail(session, email)
        if admin is None:
            admin = self.admin_dao.createAdmin(
                session, AdminUser(email=email, role=SUPER_ADMIN, added_by=SYSTEM_ACTOR, created_at=utcnow())
            )
            logger.info("Provisioned %s as super admin for dev login", email)
        return admin.role

    @transactional
    def list_members(self, session=None) -> List[TeamMember]:
        return [
            TeamMember(
                id=str(admin.id),
                email=admin.email,
                role=admin.role,
                added_by=admin.added_by,
                created_at=admin.created_at,
            )
            for admin in self.admin_dao.fetchAdmins(session)
        ]

    @transactional
    def add_member(self, email: Optional[str], role: Optional[str], added_by: str, session=None) -> TeamMemberAdded:
        """
        Authorize a new operator. Unknown or missing roles fall back to moderator.

        Raises
        ------
        InvalidRequestError
            Missing email, or the email is already a member.
        """
        email = normalize_email(email)
        if not email:
            raise InvalidRequestError("Email required")
        if role not in ROLES:
            role = MODERATOR
        if self.admin_dao.fetchAdminByEmail(session, email) is not None:
            raise InvalidRequestError("User already exists")
        self.admin_dao.createAdmin(session, AdminUser(email=email, role=role, added_by=added_by, created_at=utcnow()))
        logger.info("%s added %s as %s", added_by, email, role)
        return TeamMemberAdded(email=email, role=role)

    @transactional
    def remove_member(self, email: Optional[str], requested_by: str, session=None) -> None:
        """
        Revoke an operator.

        Raises
        ------
        InvalidRequestError
            Missing email, or the requester is removing their own account.
        NotFoundError
            No member has this email.
        """
        email = normalize_email(email)
        if not email:
            raise InvalidRequestError("Email required")
        if email == normalize_email(requested_by):
            raise InvalidRequestError("You cannot remove your own account")
        if self.admin_dao.deleteAdminByEmail(session, email) == 0:
            raise NotFoundError("User not found")
        logger.info("%s removed %s from the team", requested_by, email)
