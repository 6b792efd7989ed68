"""Anonymous voter identity derived from the requester's network address."""

from __future__ import annotations

import hashlib

from starlette.requests import Request

# Requesters without a resolvable address all share this identity.
UNKNOWN_ADDRESS = "unknown"


def anonymous_voter_id(address: str | None, secret: str) -> str:
    """Return a stable, non-reversible voter id for ``address``.

    The id is the SHA-256 hex digest of ``address || secret``. Rotating the
    secret invalidates every previously issued id.
    """
    source = address or UNKNOWN_ADDRESS
    return hashlib.sha256(f"{source}{secret}".encode("utf-8")).hexdigest()


def client_address(request: Request, *, trust_forwarded_for: bool = False) -> str | None:
    """Resolve the requester's address.

    ``X-Forwarded-For`` is honoured only when the deployment sits behind a
    trusted proxy; its first hop is the original client.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
    if request.client is None:
        return None
    return request.client.host or None
