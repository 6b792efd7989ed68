"""Shared API dependencies for voter identity, admin sessions and pagination."""

from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from thought_dump.core.errors import UnauthorizedError
from thought_dump.core.security import decode_admin_token
from thought_dump.core.settings import settings
from thought_dump.db.session import get_db
from thought_dump.services.identity import anonymous_voter_id, client_address

# Bearer scheme for admin session tokens; missing headers are reported by require_admin.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_voter_id(request: Request) -> str:
    """Derive the anonymous voter id for the current requester."""
    address = client_address(request, trust_forwarded_for=settings.trust_forwarded_for)
    return anonymous_voter_id(address, settings.hash_secret)


def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Return the admin subject from a valid session token.

    Raises:
        UnauthorizedError: If no token was sent or it does not validate.
    """
    if credentials is None:
        raise UnauthorizedError("Unauthorized")
    return decode_admin_token(credentials.credentials)


def page_param(page: int = Query(1, ge=1, description="1-based page number")) -> int:
    return page


VoterIdDep = Annotated[str, Depends(get_voter_id)]
AdminDep = Annotated[str, Depends(require_admin)]
PageDep = Annotated[int, Depends(page_param)]
