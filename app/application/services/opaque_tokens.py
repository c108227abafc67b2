"""Opaque identifiers for links and requests (request ids, reset and share tokens).

Tokens are random URL-safe strings; only their SHA-256 digest is stored when
the token itself grants an action.
"""

from __future__ import annotations

import hashlib
import re
import secrets

# 32 random bytes -> 43 URL-safe base64 characters.
OPAQUE_TOKEN_BYTES = 32
_OPAQUE_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{16,128}$")


def new_opaque_token(nbytes: int = OPAQUE_TOKEN_BYTES) -> str:
    """Return a new unguessable URL-safe token."""
    return secrets.token_urlsafe(nbytes)


def digest_token(token: str) -> str:
    """Return the hex SHA-256 digest used as the storage key for token."""
    return hashlib.sha256(token.encode()).hexdigest()


def is_well_formed_token(value: str | None) -> bool:
    """Cheap shape check before touching storage (charset and length only)."""
    return bool(value) and bool(_OPAQUE_TOKEN_RE.fullmatch(value or ""))
