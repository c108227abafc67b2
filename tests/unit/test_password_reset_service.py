"""Tests for the two-party password reset: initiate, verify, finalize."""

import asyncio
from datetime import timedelta

import pytest

from app.application.services.opaque_tokens import digest_token
from app.domain.enums import AccountKind, ConsentStatus, PartnerRole
from app.domain.exceptions import (
    AlreadyUsedException,
    AuthorizationException,
    ExpiredException,
    InvalidCodeException,
    NotificationDeliveryException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import ConsentHarness, make_account

CODE = "482913"


@pytest.fixture
def h(harness: ConsentHarness) -> ConsentHarness:
    harness.accounts.seed(make_account())
    harness.fix_codes(CODE)
    return harness


async def _verified(h: ConsentHarness, email: str = "a@x.com") -> str:
    """Run initiate + verify; return the reset token from the emailed link."""
    started = await h.reset_service.initiate(email)
    await h.reset_service.verify(started.request_id, CODE)
    return h.notifier.last("finalize_link").data["token"]


class TestInitiate:
    async def test_code_goes_to_the_counterpart(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("A@X.com")
        mail = h.notifier.last("code")
        assert mail.to == "b@x.com"
        assert mail.data["code"] == CODE
        assert mail.data["initiator_name"] == "Sam"
        assert mail.data["partner_display_name"] == "Alex"
        assert started.partner_email_hint == "b***@x.com"
        assert started.code_expires_at == h.clock.now + timedelta(minutes=10)

    async def test_partner_can_initiate_too(self, h: ConsentHarness) -> None:
        await h.reset_service.initiate("b@x.com")
        assert h.notifier.last("code").to == "a@x.com"
        (request,) = h.store.reset_requests.values()
        assert request.initiating_role is PartnerRole.PARTNER

    async def test_only_the_code_hash_is_stored(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        request = h.store.reset_requests[started.request_id]
        assert request.status is ConsentStatus.CODE_SENT
        assert request.code_hash != CODE
        assert request.mfa_verified_at is None
        assert request.reset_token_hash is None
        assert CODE not in repr(started)

    async def test_request_id_is_opaque(self, h: ConsentHarness) -> None:
        first = await h.reset_service.initiate("a@x.com")
        second = await h.reset_service.initiate("a@x.com")
        assert first.request_id != second.request_id
        assert len(first.request_id) >= 32

    async def test_unknown_email(self, h: ConsentHarness) -> None:
        with pytest.raises(ResourceNotFoundException):
            await h.reset_service.initiate("nobody@x.com")

    @pytest.mark.parametrize("email", ["", "   ", "samandalex", "a@b@x.com", "a b@x.com"])
    async def test_invalid_email(self, h: ConsentHarness, email: str) -> None:
        with pytest.raises(ValidationException):
            await h.reset_service.initiate(email)

    async def test_single_account_is_refused(self, harness: ConsentHarness) -> None:
        harness.accounts.seed(
            make_account(kind=AccountKind.SINGLE, partner_email=None, partner_display_name=None)
        )
        with pytest.raises(ValidationException, match="Single member"):
            await harness.reset_service.initiate("a@x.com")

    async def test_missing_counterpart_email(self, harness: ConsentHarness) -> None:
        harness.accounts.seed(make_account(partner_email=None))
        with pytest.raises(ValidationException, match="partner email is required"):
            await harness.reset_service.initiate("a@x.com")
        assert harness.store.reset_requests == {}

    async def test_failed_code_email_withdraws_the_request(self, h: ConsentHarness) -> None:
        h.notifier.fail_on.add("code")
        with pytest.raises(NotificationDeliveryException):
            await h.reset_service.initiate("a@x.com")
        assert h.store.reset_requests == {}

    async def test_second_initiate_supersedes_the_first(self, h: ConsentHarness) -> None:
        """Verifying the first request's code after a new initiate is NotFound."""
        first = await h.reset_service.initiate("a@x.com")
        await h.reset_service.initiate("a@x.com")
        with pytest.raises(ResourceNotFoundException):
            await h.reset_service.verify(first.request_id, CODE)


class TestVerify:
    async def test_correct_code_sends_link_to_initiator(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        verified = await h.reset_service.verify(started.request_id, CODE)
        assert verified.link_sent
        mail = h.notifier.last("finalize_link")
        assert mail.to == "a@x.com"
        assert mail.data["approving_partner_name"] == "Alex"
        request = h.store.reset_requests[started.request_id]
        assert request.status is ConsentStatus.VERIFIED
        assert request.mfa_verified_at == h.clock.now
        assert request.reset_token_hash == digest_token(mail.data["token"])
        assert verified.reset_token_expires_at == h.clock.now + timedelta(minutes=60)

    async def test_code_with_separators_is_accepted(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        assert (await h.reset_service.verify(started.request_id, "482 913")).link_sent

    @pytest.mark.parametrize("code", ["000000", "48291", "", "abcdef"])
    async def test_incorrect_code_never_sets_mfa(self, h: ConsentHarness, code: str) -> None:
        started = await h.reset_service.initiate("a@x.com")
        with pytest.raises(InvalidCodeException):
            await h.reset_service.verify(started.request_id, code)
        request = h.store.reset_requests[started.request_id]
        assert request.mfa_verified_at is None
        assert request.status is ConsentStatus.CODE_SENT
        assert h.notifier.of_kind("finalize_link") == []

    async def test_same_correct_code_twice_is_already_used(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        await h.reset_service.verify(started.request_id, CODE)
        with pytest.raises(AlreadyUsedException):
            await h.reset_service.verify(started.request_id, CODE)

    async def test_expired_code_is_rejected_even_when_it_matches(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        h.clock.advance(minutes=10)
        with pytest.raises(ExpiredException):
            await h.reset_service.verify(started.request_id, CODE)
        assert h.store.reset_requests[started.request_id].mfa_verified_at is None

    @pytest.mark.parametrize("request_id", ["", "nope", "x" * 43])
    async def test_unknown_request(self, h: ConsentHarness, request_id: str) -> None:
        with pytest.raises(ResourceNotFoundException):
            await h.reset_service.verify(request_id, CODE)

    async def test_used_beats_expired(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        await h.reset_service.verify(started.request_id, CODE)
        h.clock.advance(days=1)
        with pytest.raises(AlreadyUsedException):
            await h.reset_service.verify(started.request_id, "000000")

    async def test_link_email_failure_is_reported_not_raised(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        h.notifier.fail_on.add("finalize_link")
        verified = await h.reset_service.verify(started.request_id, CODE)
        assert not verified.link_sent
        assert h.store.reset_requests[started.request_id].status is ConsentStatus.VERIFIED

    async def test_concurrent_verify_exactly_one_wins(self, h: ConsentHarness) -> None:
        started = await h.reset_service.initiate("a@x.com")
        results = await asyncio.gather(
            h.reset_service.verify(started.request_id, CODE),
            h.reset_service.verify(started.request_id, CODE),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        assert len(failures) == 1
        assert isinstance(failures[0], AlreadyUsedException)
        (link,) = h.notifier.of_kind("finalize_link")
        request = h.store.reset_requests[started.request_id]
        assert request.status is ConsentStatus.VERIFIED
        assert request.reset_token_hash == digest_token(link.data["token"])


class TestFinalize:
    async def test_updates_password_and_shares_it(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        finalized = await h.reset_service.finalize(token, "NewPass123!")
        assert finalized.partner_share_sent
        assert h.store.accounts["acct-1"].hashed_password == "hashed:NewPass123!"
        share = h.notifier.last("handoff_link")
        assert share.to == "b@x.com"
        assert share.data["initiator_name"] == "Sam"
        assert await h.handoff_service.reveal(share.data["token"]) == "NewPass123!"

    async def test_request_is_completed(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        await h.reset_service.finalize(token, "NewPass123!")
        (request,) = h.store.reset_requests.values()
        assert request.status is ConsentStatus.COMPLETED
        assert request.used_at == h.clock.now

    async def test_token_works_once(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        await h.reset_service.finalize(token, "NewPass123!")
        with pytest.raises(AlreadyUsedException):
            await h.reset_service.finalize(token, "Another123!")
        assert h.store.accounts["acct-1"].hashed_password == "hashed:NewPass123!"

    async def test_unknown_token(self, h: ConsentHarness) -> None:
        with pytest.raises(ResourceNotFoundException):
            await h.reset_service.finalize("t" * 43, "NewPass123!")

    async def test_expired_link(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        h.clock.advance(minutes=61)
        with pytest.raises(ExpiredException):
            await h.reset_service.finalize(token, "NewPass123!")
        assert h.store.accounts["acct-1"].hashed_password == "hashed:OldPass12"

    async def test_weak_password_keeps_the_link_usable(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        with pytest.raises(ValidationException):
            await h.reset_service.finalize(token, "weak")
        assert (await h.reset_service.finalize(token, "NewPass123!")).partner_share_sent

    async def test_share_failure_does_not_undo_the_reset(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        h.notifier.fail_on.add("handoff_link")
        finalized = await h.reset_service.finalize(token, "NewPass123!")
        assert not finalized.partner_share_sent
        assert h.store.accounts["acct-1"].hashed_password == "hashed:NewPass123!"

    async def test_concurrent_finalize_exactly_one_wins(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        results = await asyncio.gather(
            h.reset_service.finalize(token, "FirstPass12"),
            h.reset_service.finalize(token, "SecondPass34"),
            return_exceptions=True,
        )
        successes = [r for r in results if not isinstance(r, BaseException)]
        failures = [r for r in results if isinstance(r, BaseException)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], (AlreadyUsedException, ResourceNotFoundException))
        assert len(h.notifier.of_kind("handoff_link")) == 1
        winner = "FirstPass12" if results[0] is successes[0] else "SecondPass34"
        assert h.store.accounts["acct-1"].hashed_password == f"hashed:{winner}"

    async def test_account_gone_rolls_back_completion(self, h: ConsentHarness) -> None:
        token = await _verified(h)
        del h.store.accounts["acct-1"]
        with pytest.raises(ResourceNotFoundException):
            await h.reset_service.finalize(token, "NewPass123!")
        (request,) = h.store.reset_requests.values()
        assert request.status is ConsentStatus.VERIFIED
        assert h.uow.rollbacks == 1


async def test_unapproved_request_is_refused(h: ConsentHarness) -> None:
    """A reset token on a request without mfa_verified_at yields AuthorizationException."""
    token = await _verified(h)
    (request,) = h.store.reset_requests.values()
    # Bypass entity validation: a stored row in an impossible state.
    object.__setattr__(request, "mfa_verified_at", None)
    h.store.reset_requests[request.id] = request
    with pytest.raises(AuthorizationException):
        await h.reset_service.finalize(token, "NewPass123!")
