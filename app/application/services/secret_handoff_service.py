"""Secret handoff: deliver a plaintext secret to one recipient, exactly once.

The plaintext is encrypted under a server-held key; the random token in the
emailed link only locates the record (stored as a digest) and is never part
of the key.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from app.application.dtos.consent import HandoffIssued
from app.application.interfaces.repositories import ISecretHandoffRepository, IUnitOfWork
from app.application.interfaces.services import ISecretCipher
from app.application.services.consent_checks import (
    Challenge,
    ChallengeFailure,
    evaluate,
    failure_exception,
)
from app.application.services.opaque_tokens import (
    digest_token,
    is_well_formed_token,
    new_opaque_token,
)
from app.domain.entities import SecretHandoffEntity
from app.domain.exceptions import AlreadyUsedException
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

DEFAULT_HANDOFF_TTL_MINUTES = 60
RESOURCE_TYPE = "password_share"

_REVEAL_MESSAGES = {
    ChallengeFailure.NOT_FOUND: "This link is no longer available.",
    ChallengeFailure.ALREADY_USED: "This password has already been viewed.",
    ChallengeFailure.EXPIRED: "This password link has expired.",
}


class SecretHandoffService:
    """Issue and reveal one-time encrypted secrets."""

    def __init__(
        self,
        handoff_repo: ISecretHandoffRepository,
        cipher: ISecretCipher,
        uow: IUnitOfWork,
        *,
        ttl_minutes: int = DEFAULT_HANDOFF_TTL_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = handoff_repo
        self._cipher = cipher
        self._uow = uow
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock

    async def issue(self, account_id: str, recipient_email: str, plaintext: str) -> HandoffIssued:
        """Encrypt plaintext for recipient_email; return the raw token and its expiry."""
        token = new_opaque_token()
        expires_at = self._clock() + self._ttl
        handoff = SecretHandoffEntity(
            id=str(uuid.uuid4()),
            token_hash=digest_token(token),
            account_id=account_id,
            recipient_email=recipient_email,
            encrypted_payload=self._cipher.encrypt(plaintext),
            expires_at=expires_at,
        )
        async with self._uow.transaction():
            await self._repo.add(handoff)
        logger.info("Secret handoff issued for account %s (expires %s)", account_id, expires_at.isoformat())
        return HandoffIssued(token=token, expires_at=expires_at)

    async def reveal(self, token: str) -> str:
        """Return the plaintext once; every later call fails.

        Raises:
            ResourceNotFoundException: Unknown or malformed token.
            AlreadyUsedException: Already revealed (or burnt after expiry).
            ExpiredException: Past expiry; the record is burnt so retries see AlreadyUsed.
        """
        handoff = None
        if is_well_formed_token(token):
            handoff = await self._repo.get_by_token_hash(digest_token(token))
        now = self._clock()
        failure = await evaluate(
            Challenge(
                found=handoff is not None,
                consumed=handoff is not None and handoff.used_at is not None,
                expired=handoff is not None and handoff.is_expired(now),
            )
        )
        if failure is ChallengeFailure.EXPIRED and handoff is not None:
            async with self._uow.transaction():
                await self._repo.mark_used(handoff.id, now=now)
        if failure is not None:
            raise failure_exception(failure, RESOURCE_TYPE, _REVEAL_MESSAGES)
        assert handoff is not None

        plaintext = self._cipher.decrypt(handoff.encrypted_payload)
        async with self._uow.transaction():
            claimed = await self._repo.mark_used(handoff.id, now=now)
        if not claimed:
            raise AlreadyUsedException(RESOURCE_TYPE, _REVEAL_MESSAGES[ChallengeFailure.ALREADY_USED])
        logger.info("Secret handoff revealed for account %s", handoff.account_id)
        return plaintext
