"""
Dashboard session tokens.

A session token is an HS256 (by default) JWT carrying the operator's `email`
and `role`, with `sub` set to the email and an `exp` derived from
`settings.ACCESS_TOKEN_EXPIRE_MINUTES`. Tokens are stateless: revoking an
operator takes effect when their current token expires.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from jose import JWTError, jwt

from visakha_backend.database.config.config import settings

logger = logging.getLogger(__name__)


def create_access_token(data: dict) -> str:
    """
    Sign `data` as a JWT.

    Parameters
    ----------
    data : dict
        Claims to embed. `sub` falls back to `data["email"]`.

    Returns
    -------
    str
        The compact token string, valid for `ACCESS_TOKEN_EXPIRE_MINUTES`.
    """
    claims = dict(data)
    claims.setdefault("sub", data.get("email"))
    issued_at = int(datetime.now(timezone.utc).timestamp())
    claims["exp"] = issued_at + int(settings.ACCESS_TOKEN_EXPIRE_MINUTES) * 60
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_session_token(email: str, role: str) -> str:
    return create_access_token({"email": email, "role": role})


def verify_token(token: str) -> Optional[Dict[str, str]]:
    """
    Identity carried by a session token, or None.

    None covers a bad signature, an expired or malformed token, and a token
    missing either the `email` or the `role` claim.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        return None
    email, role = claims.get("email"), claims.get("role")
    if not email or not role:
        return None
    return {"email": email, "role": role}
