"""Login for shared accounts: either partner's email (or the username) plus the shared password."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from app.application.interfaces.repositories import IAccountRepository
from app.application.interfaces.services import IPasswordHasher, ITokenSigner
from app.domain.entities import AccountEntity
from app.domain.enums import AccountKind, PartnerRole
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuetException,
)
from app.domain.value_objects import normalize_email
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_PURPOSE = "access"


@dataclass(frozen=True)
class LoginResult:
    """Bearer token plus which partner signed in."""

    access_token: str
    account_id: str
    role: PartnerRole


class AuthenticationService:
    """Check credentials and issue bearer tokens."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        password_hasher: IPasswordHasher,
        signer: ITokenSigner,
        *,
        access_token_ttl_minutes: int = 30,
    ) -> None:
        self._accounts = account_repo
        self._hasher = password_hasher
        self._signer = signer
        self._ttl = timedelta(minutes=access_token_ttl_minutes)
        self._dummy_hash: str | None = None

    async def _burn_time(self, password: str) -> None:
        """Run one password check against a throwaway hash so unknown accounts cost the same."""
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash_password("not-a-real-password")
        await self._hasher.verify_password(password, self._dummy_hash)

    async def login(self, identifier: str, password: str) -> LoginResult:
        """Return a bearer token for the account.

        Raises:
            AuthenticationException: Unknown account or wrong password.
            AuthorizationException: Couple account whose emails are not both verified yet.
        """
        normalized = normalize_email(identifier) or ""
        account = await self._accounts.find_by_email_or_username(normalized)
        if account is None:
            await self._burn_time(password)
            raise AuthenticationException("Invalid credentials")
        if not await self._hasher.verify_password(password, account.hashed_password):
            raise AuthenticationException("Invalid credentials")
        if account.kind is AccountKind.COUPLE and not account.is_fully_verified:
            raise AuthorizationException(
                "Account not fully verified. Please check your emails for verification links.",
                reason="email_verification_pending",
            )
        role = account.role_for_email(normalized) or PartnerRole.PRIMARY
        token = self._signer.encode(
            {"sub": account.id, "role": role.value, "purpose": ACCESS_TOKEN_PURPOSE},
            self._ttl,
        )
        logger.info("Login succeeded for account %s (%s)", account.id, role.value)
        return LoginResult(access_token=token, account_id=account.id, role=role)

    async def authenticate_token(self, token: str) -> AccountEntity:
        """Resolve a bearer token to its account.

        Raises:
            AuthenticationException: Invalid, expired, or non-access token, or account gone.
        """
        try:
            claims = self._signer.decode(token)
        except DuetException as exc:
            raise AuthenticationException("Could not validate credentials") from exc
        account_id = claims.get("sub")
        if claims.get("purpose") != ACCESS_TOKEN_PURPOSE or not isinstance(account_id, str):
            raise AuthenticationException("Could not validate credentials")
        account = await self._accounts.get_by_id(account_id)
        if account is None:
            raise AuthenticationException("Could not validate credentials")
        return account
