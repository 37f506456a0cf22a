"""
Auth Gateway
============

Identity verification, session token guards and the login routes.

Flow
----
1. The web client obtains a Google ID token and posts it to `/auth/google`.
2. `verify_external_identity` checks it with `google-auth` and extracts the
   email.
3. The email must have an `admin_users` record; its role goes into the
   session token (`issue_session_token`).
4. Protected routes read `Authorization: Bearer <token>`:
   - missing token → 401
   - invalid or expired token → 403
   - super-admin routes additionally require `role == "super_admin"` → 403
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from visakha_backend.api.dependencies import get_team_service
from visakha_backend.api.models import GoogleLogin, SessionResponse, SessionUser
from visakha_backend.api.utils import issue_session_token, verify_token
from visakha_backend.database.config.config import settings
from visakha_backend.database.core.team import TeamService, normalize_email
from visakha_backend.database.entities.admin_user import SUPER_ADMIN

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
"""Login routes."""

bearer_scheme = HTTPBearer(auto_error=False)


class IdentityError(Exception):
    """The external identity token could not be verified."""


def verify_external_identity(token: str) -> Optional[str]:
    """
    Verify a Google ID token and return the email it asserts.

    Returns None when the token is valid but carries no email.

    Raises
    ------
    IdentityError
        Signature, audience or expiry check failed.
    """
    try:
        payload = id_token.verify_oauth2_token(
            token,
            google_requests.Request(),
            settings.GOOGLE_CLIENT_ID or None,
        )
    except ValueError as e:
        raise IdentityError(str(e)) from e
    return payload.get("email")


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Dict[str, str]:
    """Session identity `{email, role}` from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = verify_token(credentials.credentials)
    if user is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user


def require_super_admin(user: Dict[str, str] = Depends(get_current_user)) -> Dict[str, str]:
    if user["role"] != SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Requires Super Admin privileges")
    return user


@router.post("/google", response_model=SessionResponse)
def google_login(data: GoogleLogin, team: TeamService = Depends(get_team_service)):
    """
    Exchange a Google ID token for a dashboard session.

    Response:
        200: {token, user: {email, role}}
        400: token missing, or no email in the verified token
        401: token could not be verified
        403: email is not an authorized operator
    """
    if not data.token:
        raise HTTPException(status_code=400, detail="Token required")
    try:
        email = verify_external_identity(data.token)
    except IdentityError as e:
        logger.warning("Google token verification failed: %s", e)
        raise HTTPException(status_code=401, detail="Authentication failed")
    email = normalize_email(email)
    if not email:
        raise HTTPException(status_code=400, detail="Invalid token")

    role = team.lookup_authorization(email)
    if role is None:
        logger.info("Login refused for %s: not an authorized user", email)
        raise HTTPException(status_code=403, detail="Access denied. Not an authorized user.")

    logger.info("%s signed in as %s", email, role)
    return SessionResponse(token=issue_session_token(email, role), user=SessionUser(email=email, role=role))


@router.post("/dev-login", response_model=SessionResponse)
def dev_login(team: TeamService = Depends(get_team_service)):
    """Session for the bootstrap admin without Google. Unavailable in production."""
    if settings.is_production:
        raise HTTPException(status_code=403, detail="Dev login not available in production")
    email = normalize_email(settings.BOOTSTRAP_ADMIN_EMAIL)
    role = team.ensure_admin(email)
    return SessionResponse(token=issue_session_token(email, role), user=SessionUser(email=email, role=role))
