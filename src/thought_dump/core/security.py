"""Admin credential checks and session tokens."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from thought_dump.core.errors import UnauthorizedError
from thought_dump.core.settings import settings

ADMIN_ROLE = "admin"


def verify_admin_key(candidate: str) -> bool:
    """Compare a presented admin key with ``ADMIN_SECRET`` in constant time.

    An unset secret disables admin login entirely.
    """
    expected = settings.admin_secret
    if not expected:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def create_admin_token(subject: str = ADMIN_ROLE) -> str:
    """Create a signed admin session token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.admin_token_expire_minutes)
    to_encode: dict[str, object] = {"sub": subject, "role": ADMIN_ROLE, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_admin_token(token: str) -> str:
    """Return the admin subject encoded in ``token``.

    Raises:
        UnauthorizedError: If the token is malformed, expired or lacks the admin role.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise UnauthorizedError("Could not validate credentials") from err

    subject = payload.get("sub")
    if subject is None or payload.get("role") != ADMIN_ROLE:
        raise UnauthorizedError("Could not validate credentials")
    return str(subject)
