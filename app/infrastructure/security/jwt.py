"""Signed, time-boxed tokens (JWT, python-jose) for bearer auth and email ownership links.

Uses app.core.config for secret and algorithm; app.shared.utils for UTC time.
"""

from datetime import timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import Settings, get_settings
from app.domain.exceptions import ExpiredException, ValidationException
from app.shared.utils.datetime import utc_now


class JwtTokenSigner:
    """ITokenSigner using HS256 (or the configured algorithm)."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._secret = settings.secret_key.get_secret_value()
        self._algorithm = settings.algorithm

    def encode(self, claims: dict[str, Any], expires_delta: timedelta) -> str:
        """Return a JWT carrying claims plus exp.

        Args:
            claims: Claims to encode (sub, role, purpose, ...).
            expires_delta: Lifetime from now.
        """
        to_encode = dict(claims)
        to_encode["exp"] = utc_now() + expires_delta
        return cast(str, jwt.encode(to_encode, self._secret, algorithm=self._algorithm))

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature and expiry; return the claims.

        Enforces presence of exp and sub.

        Raises:
            ExpiredException: Signature valid but token expired.
            ValidationException: Bad signature, malformed token, or missing claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as e:
            raise ExpiredException("token", "This link has expired. Request a new one.") from e
        except JWTError as e:
            raise ValidationException("This link is invalid.", field="token") from e
        return cast(dict[str, Any], payload)
