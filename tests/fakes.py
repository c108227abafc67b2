"""In-memory implementations of the consent protocol ports for unit and API tests.

Repositories apply the same conditional-write rules as the SQL ones; the
unit of work serializes transactions and restores a snapshot on rollback.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from app.application.services.authentication_service import AuthenticationService
from app.application.services.one_time_code import OneTimeCodeService
from app.application.services.ownership_token_service import OwnershipTokenService
from app.application.services.secret_handoff_service import SecretHandoffService
from app.application.use_cases.account_deletion import AccountDeletionService
from app.application.use_cases.email_verification import EmailVerificationService
from app.application.use_cases.password_reset import PasswordResetService
from app.core.config import Settings
from app.domain.entities import (
    AccountEntity,
    DeletionRequestEntity,
    PasswordResetRequestEntity,
    SecretHandoffEntity,
)
from app.domain.enums import AccountKind, ConsentStatus, PartnerRole
from app.infrastructure.security import FernetSecretCipher, JwtTokenSigner

TEST_SETTINGS = Settings(
    secret_key="unit-test-secret-key-0123456789abcdef",
    encryption_salt="unit-test-salt",
)
_TEST_CIPHER = FernetSecretCipher(TEST_SETTINGS)

# Children removed by the account deletion cascade.
OWNED_KINDS = ("photos", "photo_comments", "shared_photos", "direct_messages", "favorites")


class MutableClock:
    """Injectable clock; tests move it forward to cross expiries."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


class InMemoryStore:
    """Every table the fakes share, so one unit of work can snapshot them together."""

    def __init__(self) -> None:
        self.accounts: dict[str, AccountEntity] = {}
        self.owned: dict[str, dict[str, int]] = defaultdict(dict)
        self.reset_requests: dict[str, PasswordResetRequestEntity] = {}
        self.deletion_requests: dict[str, DeletionRequestEntity] = {}
        self.handoffs: dict[str, SecretHandoffEntity] = {}

    def _tables(self) -> tuple[dict, ...]:
        return (
            self.accounts,
            self.owned,
            self.reset_requests,
            self.deletion_requests,
            self.handoffs,
        )

    def snapshot(self) -> list[dict]:
        return [
            {k: dict(v) if isinstance(v, dict) else v for k, v in table.items()}
            for table in self._tables()
        ]

    def restore(self, snapshot: list[dict]) -> None:
        for table, saved in zip(self._tables(), snapshot, strict=True):
            table.clear()
            table.update(saved)


class FakeUnitOfWork:
    """Serializes transactions; rollback restores the snapshot taken at begin."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._lock = asyncio.Lock()
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._lock:
            saved = self._store.snapshot()
            try:
                yield
            except BaseException:
                self._store.restore(saved)
                self.rollbacks += 1
                raise
            self.commits += 1


class InMemoryAccountRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.fail_cascade = False

    def seed(self, account: AccountEntity, **owned: int) -> AccountEntity:
        self._store.accounts[account.id] = account
        self._store.owned[account.id] = {kind: owned.get(kind, 0) for kind in OWNED_KINDS}
        return account

    def owned_rows(self, account_id: str) -> int:
        return sum(self._store.owned.get(account_id, {}).values())

    async def get_by_id(self, account_id: str) -> AccountEntity | None:
        return self._store.accounts.get(account_id)

    async def find_by_email_or_username(self, text: str) -> AccountEntity | None:
        needle = (text or "").strip().lower()
        for account in self._store.accounts.values():
            if needle and needle in (
                account.primary_email,
                account.partner_email,
                account.username.lower(),
            ):
                return account
        return None

    async def find_by_emails(self, primary_email: str, partner_email: str) -> AccountEntity | None:
        for account in self._store.accounts.values():
            if (
                account.kind is AccountKind.COUPLE
                and account.primary_email == primary_email.strip().lower()
                and account.partner_email == partner_email.strip().lower()
            ):
                return account
        return None

    async def update_password_hash(self, account_id: str, hashed_password: str) -> bool:
        account = self._store.accounts.get(account_id)
        if account is None:
            return False
        self._store.accounts[account_id] = replace(account, hashed_password=hashed_password)
        return True

    async def set_email_verified(self, account_id: str, role: PartnerRole) -> bool:
        account = self._store.accounts.get(account_id)
        if account is None:
            return False
        flag = (
            "is_partner_email_verified" if role is PartnerRole.PARTNER else "is_primary_email_verified"
        )
        self._store.accounts[account_id] = replace(account, **{flag: True})
        return True

    async def delete_account_cascade(self, account_id: str) -> bool:
        if account_id not in self._store.accounts:
            return False
        self._store.owned.pop(account_id, None)
        for table in (self._store.reset_requests, self._store.handoffs):
            for key in [k for k, row in table.items() if row.account_id == account_id]:
                del table[key]
        if self.fail_cascade:
            raise RuntimeError("cascade failed")
        del self._store.accounts[account_id]
        return True


class InMemoryPasswordResetRequestRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._rows = store.reset_requests

    async def add(self, request: PasswordResetRequestEntity) -> PasswordResetRequestEntity:
        self._rows[request.id] = request
        return request

    async def get_by_id(self, request_id: str) -> PasswordResetRequestEntity | None:
        return self._rows.get(request_id)

    async def get_by_reset_token_hash(
        self, reset_token_hash: str
    ) -> PasswordResetRequestEntity | None:
        for row in self._rows.values():
            if row.reset_token_hash == reset_token_hash:
                return row
        return None

    async def delete_open_for_account(self, account_id: str) -> int:
        doomed = [
            k
            for k, row in self._rows.items()
            if row.account_id == account_id and not row.status.is_terminal
        ]
        for key in doomed:
            del self._rows[key]
        return len(doomed)

    async def delete(self, request_id: str) -> None:
        self._rows.pop(request_id, None)

    async def mark_verified(
        self,
        request_id: str,
        *,
        reset_token_hash: str,
        reset_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        row = self._rows.get(request_id)
        if (
            row is None
            or not row.status.can_transition_to(ConsentStatus.VERIFIED)
            or row.used_at is not None
            or row.code_expires_at <= now
        ):
            return False
        self._rows[request_id] = replace(
            row,
            status=ConsentStatus.VERIFIED,
            mfa_verified_at=now,
            reset_token_hash=reset_token_hash,
            reset_token_expires_at=reset_token_expires_at,
        )
        return True

    async def mark_completed(self, request_id: str, *, now: datetime) -> bool:
        row = self._rows.get(request_id)
        if (
            row is None
            or not row.status.can_transition_to(ConsentStatus.COMPLETED)
            or row.mfa_verified_at is None
            or row.used_at is not None
            or row.is_reset_token_expired(now)
        ):
            return False
        self._rows[request_id] = replace(row, status=ConsentStatus.COMPLETED, used_at=now)
        return True


class InMemoryDeletionRequestRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._rows = store.deletion_requests
        self._sequence = 0
        self._order: dict[str, int] = {}

    async def add(self, request: DeletionRequestEntity) -> DeletionRequestEntity:
        self._sequence += 1
        self._order[request.id] = self._sequence
        self._rows[request.id] = request
        return request

    async def get_latest_for_account(self, account_id: str) -> DeletionRequestEntity | None:
        mine = [row for row in self._rows.values() if row.account_id == account_id]
        if not mine:
            return None
        return max(mine, key=lambda row: self._order.get(row.id, 0))

    async def delete_open_for_account(self, account_id: str) -> int:
        doomed = [
            k
            for k, row in self._rows.items()
            if row.account_id == account_id and not row.status.is_terminal
        ]
        for key in doomed:
            del self._rows[key]
        return len(doomed)

    async def mark_verified(self, request_id: str, *, now: datetime) -> bool:
        row = self._rows.get(request_id)
        if (
            row is None
            or not row.status.can_transition_to(ConsentStatus.VERIFIED)
            or row.is_expired(now)
        ):
            return False
        self._rows[request_id] = replace(row, status=ConsentStatus.VERIFIED, verified_at=now)
        return True

    async def mark_completed(self, request_id: str, *, now: datetime) -> bool:
        row = self._rows.get(request_id)
        if row is None or not row.status.can_transition_to(ConsentStatus.COMPLETED):
            return False
        self._rows[request_id] = replace(row, status=ConsentStatus.COMPLETED, completed_at=now)
        return True


class InMemorySecretHandoffRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._rows = store.handoffs

    async def add(self, handoff: SecretHandoffEntity) -> SecretHandoffEntity:
        self._rows[handoff.id] = handoff
        return handoff

    async def get_by_token_hash(self, token_hash: str) -> SecretHandoffEntity | None:
        for row in self._rows.values():
            if row.token_hash == token_hash:
                return row
        return None

    async def mark_used(self, handoff_id: str, *, now: datetime) -> bool:
        row = self._rows.get(handoff_id)
        if row is None or row.used_at is not None:
            return False
        self._rows[handoff_id] = replace(row, used_at=now)
        return True


@dataclass
class SentEmail:
    kind: str
    to: str
    data: dict[str, Any]


class RecordingNotifier:
    """INotificationDispatcher that records every send; kinds in fail_on raise instead."""

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []
        self.fail_on: set[str] = set()

    def _record(self, kind: str, email: str, data: dict[str, Any]) -> None:
        if kind in self.fail_on:
            raise ConnectionError(f"{kind} delivery failed")
        self.sent.append(SentEmail(kind, email, data))

    def of_kind(self, kind: str) -> list[SentEmail]:
        return [mail for mail in self.sent if mail.kind == kind]

    def last(self, kind: str) -> SentEmail:
        matches = self.of_kind(kind)
        assert matches, f"no {kind} email was sent"
        return matches[-1]

    async def send_code(self, email: str, **kwargs: Any) -> None:
        self._record("code", email, kwargs)

    async def send_finalize_link(self, email: str, **kwargs: Any) -> None:
        self._record("finalize_link", email, kwargs)

    async def send_secret_handoff_link(self, email: str, **kwargs: Any) -> None:
        self._record("handoff_link", email, kwargs)

    async def send_deletion_code(self, email: str, **kwargs: Any) -> None:
        self._record("deletion_code", email, kwargs)

    async def send_deletion_notice(self, email: str, **kwargs: Any) -> None:
        self._record("deletion_notice", email, kwargs)

    async def send_email_verification_link(self, email: str, **kwargs: Any) -> None:
        self._record("verification_link", email, kwargs)


class PlainPasswordHasher:
    """Reversible stand-in for bcrypt so tests stay fast."""

    async def hash_password(self, password: str) -> str:
        await asyncio.sleep(0)
        return f"hashed:{password}"

    async def verify_password(self, password: str, hashed_password: str) -> bool:
        return hashed_password == f"hashed:{password}"


def make_account(**overrides: Any) -> AccountEntity:
    """Verified couple account a@x.com (Sam, primary) / b@x.com (Alex, partner)."""
    values: dict[str, Any] = {
        "id": "acct-1",
        "username": "samandalex",
        "kind": AccountKind.COUPLE,
        "primary_email": "a@x.com",
        "partner_email": "b@x.com",
        "primary_display_name": "Sam",
        "partner_display_name": "Alex",
        "hashed_password": "hashed:OldPass12",
        "is_primary_email_verified": True,
        "is_partner_email_verified": True,
    }
    values.update(overrides)
    return AccountEntity(**values)


@dataclass
class ConsentHarness:
    """Every consent service wired over one in-memory store."""

    clock: MutableClock = field(default_factory=MutableClock)
    store: InMemoryStore = field(default_factory=InMemoryStore)
    notifier: RecordingNotifier = field(default_factory=RecordingNotifier)

    def __post_init__(self) -> None:
        self.uow = FakeUnitOfWork(self.store)
        self.accounts = InMemoryAccountRepository(self.store)
        self.reset_requests = InMemoryPasswordResetRequestRepository(self.store)
        self.deletion_requests = InMemoryDeletionRequestRepository(self.store)
        self.handoffs = InMemorySecretHandoffRepository(self.store)
        self.codes = OneTimeCodeService(rounds=4)
        self.hasher = PlainPasswordHasher()
        self.signer = JwtTokenSigner(TEST_SETTINGS)
        self.cipher = _TEST_CIPHER
        self.handoff_service = SecretHandoffService(
            self.handoffs, self.cipher, self.uow, clock=self.clock
        )
        self.reset_service = PasswordResetService(
            self.accounts,
            self.reset_requests,
            self.uow,
            self.codes,
            self.hasher,
            self.notifier,
            self.handoff_service,
            clock=self.clock,
        )
        self.deletion_service = AccountDeletionService(
            self.accounts,
            self.deletion_requests,
            self.uow,
            self.codes,
            self.notifier,
            clock=self.clock,
        )
        self.ownership_tokens = OwnershipTokenService(self.signer, self.accounts, self.uow)
        self.verification_service = EmailVerificationService(
            self.accounts, self.ownership_tokens, self.notifier
        )
        self.auth_service = AuthenticationService(self.accounts, self.hasher, self.signer)

    def fix_codes(self, code: str) -> None:
        """Make every generated code equal code."""
        self.codes.generate = lambda length=None: code  # type: ignore[method-assign]
