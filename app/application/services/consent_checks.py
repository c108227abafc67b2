"""Ordered failure evaluation for single-use codes and tokens.

Every verify/finalize/reveal path resolves its failure through evaluate()
so the precedence NotFound > AlreadyUsed > NotApproved > Expired > InvalidCode
is defined in exactly one place.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from app.domain.exceptions import (
    AlreadyUsedException,
    AuthorizationException,
    DuetException,
    ExpiredException,
    InvalidCodeException,
    ResourceNotFoundException,
)


class ChallengeFailure(str, Enum):
    """Reasons a code or token is rejected, in precedence order."""

    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    NOT_APPROVED = "not_approved"
    EXPIRED = "expired"
    INVALID_CODE = "invalid_code"


@dataclass(frozen=True)
class Challenge:
    """State of the record a caller presented a code or token for."""

    found: bool
    consumed: bool = False
    approved: bool = True
    expired: bool = False


_STATE_CHECKS: tuple[tuple[ChallengeFailure, Callable[[Challenge], bool]], ...] = (
    (ChallengeFailure.NOT_FOUND, lambda c: not c.found),
    (ChallengeFailure.ALREADY_USED, lambda c: c.consumed),
    (ChallengeFailure.NOT_APPROVED, lambda c: not c.approved),
    (ChallengeFailure.EXPIRED, lambda c: c.expired),
)


async def evaluate(
    challenge: Challenge,
    code_matches: Callable[[], Awaitable[bool]] | None = None,
) -> ChallengeFailure | None:
    """Return the first failure in precedence order, or None when the challenge passes.

    code_matches runs last and only when every state check passed, so the
    slow hash comparison never runs for missing, used, or expired records.
    """
    for failure, failed in _STATE_CHECKS:
        if failed(challenge):
            return failure
    if code_matches is not None and not await code_matches():
        return ChallengeFailure.INVALID_CODE
    return None


def failure_exception(
    failure: ChallengeFailure,
    resource_type: str,
    messages: Mapping[ChallengeFailure, str] | None = None,
) -> DuetException:
    """Build the domain exception for failure, with an optional per-flow message."""
    message = (messages or {}).get(failure)
    if failure is ChallengeFailure.NOT_FOUND:
        return ResourceNotFoundException(resource_type, message=message)
    if failure is ChallengeFailure.ALREADY_USED:
        return AlreadyUsedException(resource_type, message=message)
    if failure is ChallengeFailure.NOT_APPROVED:
        return AuthorizationException(message or "Not approved yet", reason=failure.value)
    if failure is ChallengeFailure.EXPIRED:
        return ExpiredException(resource_type, message=message)
    return InvalidCodeException(message or "The verification code is incorrect")


async def enforce(
    challenge: Challenge,
    resource_type: str,
    *,
    code_matches: Callable[[], Awaitable[bool]] | None = None,
    messages: Mapping[ChallengeFailure, str] | None = None,
) -> None:
    """Raise the exception for the first failing check; return when all pass."""
    failure = await evaluate(challenge, code_matches)
    if failure is not None:
        raise failure_exception(failure, resource_type, messages)
