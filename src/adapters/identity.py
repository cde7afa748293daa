"""
Bearer token verification for editor identities (python-jose, HS256).

Claims:
- sub: user id
- email: user email
- email_verified: whether the provider verified the email
"""

import logging
import os
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.domain.entities import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def get_identity_secret() -> str:
    return os.environ.get("SITE_IDENTITY_SECRET", "dev_identity_secret_change_me")


def create_identity_token(
    identity: Identity,
    *,
    secret: str | None = None,
    algorithm: str = ALGORITHM,
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """Issue a signed token for an identity (dev tooling and tests)."""
    now = now_utc or datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims: dict[str, Any] = {
        "sub": identity.user_id,
        "email": identity.email,
        "email_verified": identity.email_verified,
        "exp": expire,
    }
    return jwt.encode(claims, secret or get_identity_secret(), algorithm=algorithm)


def decode_identity(
    token: str,
    *,
    secret: str | None = None,
    algorithm: str = ALGORITHM,
) -> Identity | None:
    """Verify a token and map its claims; None when invalid or incomplete."""
    try:
        payload = jwt.decode(token, secret or get_identity_secret(), algorithms=[algorithm])
    except JWTError as e:
        logger.debug("Rejected identity token: %s", e)
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        return None

    return Identity(
        user_id=str(user_id),
        email=str(email),
        email_verified=bool(payload.get("email_verified", False)),
    )


def is_admin(identity: Identity, admin_emails: list[str], require_verified_email: bool = True) -> bool:
    """An empty admin list admits any (verified) identity."""
    if require_verified_email and not identity.email_verified:
        return False
    if not admin_emails:
        return True
    return identity.email.strip().lower() in {e.strip().lower() for e in admin_emails}
