"""HTTP tests for /api/v1/auth: login, password reset, email verification."""

import pytest
from httpx import AsyncClient

from app.core.limiter import LOGIN_LIMIT, RESET_PER_EMAIL_LIMIT, limiter
from app.domain.enums import PartnerRole
from tests.fakes import ConsentHarness, make_account

BASE = "/api/v1/auth"
CODE = "482913"


@pytest.fixture
def seeded(harness: ConsentHarness) -> ConsentHarness:
    harness.accounts.seed(make_account())
    harness.fix_codes(CODE)
    return harness


class TestLogin:
    async def test_login_returns_bearer_token(
        self, client: AsyncClient, seeded: ConsentHarness
    ) -> None:
        response = await client.post(
            f"{BASE}/login", json={"identifier": "b@x.com", "password": "OldPass12"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["account_id"] == "acct-1"
        assert data["role"] == "partner"
        assert data["access_token"]

    async def test_wrong_password_is_401(self, client: AsyncClient, seeded: ConsentHarness) -> None:
        response = await client.post(
            f"{BASE}/login", json={"identifier": "a@x.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_ERROR"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_unverified_couple_is_403(
        self, client: AsyncClient, harness: ConsentHarness
    ) -> None:
        harness.accounts.seed(make_account(is_primary_email_verified=False))
        response = await client.post(
            f"{BASE}/login", json={"identifier": "a@x.com", "password": "OldPass12"}
        )
        assert response.status_code == 403
        assert response.json()["details"]["reason"] == "email_verification_pending"

    async def test_missing_fields_is_422(self, client: AsyncClient) -> None:
        response = await client.post(f"{BASE}/login", json={"identifier": "a@x.com"})
        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_login_is_limited_per_client(
        self, client: AsyncClient, seeded: ConsentHarness
    ) -> None:
        allowed = int(LOGIN_LIMIT.split("/")[0])
        limiter.reset()
        limiter.enabled = True
        try:
            for _ in range(allowed):
                response = await client.post(
                    f"{BASE}/login", json={"identifier": "a@x.com", "password": "nope"}
                )
                assert response.status_code == 401
            response = await client.post(
                f"{BASE}/login", json={"identifier": "a@x.com", "password": "OldPass12"}
            )
            assert response.status_code == 429
        finally:
            limiter.enabled = False
            limiter.reset()


class TestPasswordReset:
    async def test_full_reset_over_http(self, client: AsyncClient, seeded: ConsentHarness) -> None:
        started = await client.post(f"{BASE}/password-reset/initiate", json={"email": "a@x.com"})
        assert started.status_code == 200
        body = started.json()
        assert body["partner_email_hint"] == "b***@x.com"
        assert CODE not in started.text
        assert seeded.notifier.last("code").to == "b@x.com"

        verified = await client.post(
            f"{BASE}/password-reset/verify",
            json={"request_id": body["request_id"], "code": CODE},
        )
        assert verified.status_code == 200
        assert verified.json()["link_sent"] is True
        token = seeded.notifier.last("finalize_link").data["token"]
        assert token not in verified.text

        finalized = await client.post(
            f"{BASE}/password-reset/finalize",
            json={"token": token, "new_password": "NewPass123!"},
        )
        assert finalized.status_code == 200
        assert finalized.json() == {
            "message": "Password updated. Your partner will receive a one-time link "
            "with the new password.",
            "partner_share_sent": True,
        }

        again = await client.post(
            f"{BASE}/password-reset/finalize",
            json={"token": token, "new_password": "Another123!"},
        )
        assert again.status_code == 410
        assert again.json()["error"] == "ALREADY_USED"

    async def test_unknown_email_is_404(self, client: AsyncClient, seeded: ConsentHarness) -> None:
        response = await client.post(
            f"{BASE}/password-reset/initiate", json={"email": "nobody@x.com"}
        )
        assert response.status_code == 404

    async def test_wrong_code_is_400(self, client: AsyncClient, seeded: ConsentHarness) -> None:
        started = await client.post(f"{BASE}/password-reset/initiate", json={"email": "a@x.com"})
        response = await client.post(
            f"{BASE}/password-reset/verify",
            json={"request_id": started.json()["request_id"], "code": "000000"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_CODE"

    async def test_code_delivery_failure_is_502(
        self, client: AsyncClient, seeded: ConsentHarness
    ) -> None:
        seeded.notifier.fail_on.add("code")
        response = await client.post(f"{BASE}/password-reset/initiate", json={"email": "a@x.com"})
        assert response.status_code == 502
        assert response.json()["error"] == "DELIVERY_FAILED"

    async def test_weak_password_is_400(self, client: AsyncClient, seeded: ConsentHarness) -> None:
        started = await client.post(f"{BASE}/password-reset/initiate", json={"email": "a@x.com"})
        await client.post(
            f"{BASE}/password-reset/verify",
            json={"request_id": started.json()["request_id"], "code": CODE},
        )
        token = seeded.notifier.last("finalize_link").data["token"]
        response = await client.post(
            f"{BASE}/password-reset/finalize", json={"token": token, "new_password": "short"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_missing_request_id_is_422(self, client: AsyncClient) -> None:
        response = await client.post(f"{BASE}/password-reset/verify", json={"code": CODE})
        assert response.status_code == 422

    async def test_reset_starts_are_limited_per_email(
        self, client: AsyncClient, seeded: ConsentHarness
    ) -> None:
        for _ in range(RESET_PER_EMAIL_LIMIT):
            ok = await client.post(
                f"{BASE}/password-reset/initiate", json={"email": "a@x.com"}
            )
            assert ok.status_code == 200
        limited = await client.post(
            f"{BASE}/password-reset/initiate", json={"email": " A@X.com "}
        )
        assert limited.status_code == 429


class TestEmailVerification:
    @pytest.fixture
    def pending(self, harness: ConsentHarness) -> ConsentHarness:
        harness.accounts.seed(
            make_account(is_primary_email_verified=False, is_partner_email_verified=False)
        )
        return harness

    async def test_both_links_unlock_login(
        self, client: AsyncClient, pending: ConsentHarness
    ) -> None:
        primary = pending.ownership_tokens.issue("acct-1", PartnerRole.PRIMARY)
        partner = pending.ownership_tokens.issue("acct-1", PartnerRole.PARTNER)

        first = await client.post(f"{BASE}/verify-email", json={"token": primary})
        assert first.status_code == 200
        assert first.json()["partner_status"] == "awaiting"
        assert first.json()["fully_verified"] is False

        second = await client.post(f"{BASE}/verify-partner-email", json={"token": partner})
        assert second.status_code == 200
        assert second.json()["fully_verified"] is True

        login = await client.post(
            f"{BASE}/login", json={"identifier": "a@x.com", "password": "OldPass12"}
        )
        assert login.status_code == 200

    async def test_link_for_other_role_is_403(
        self, client: AsyncClient, pending: ConsentHarness
    ) -> None:
        primary = pending.ownership_tokens.issue("acct-1", PartnerRole.PRIMARY)
        response = await client.post(f"{BASE}/verify-partner-email", json={"token": primary})
        assert response.status_code == 403

    async def test_invalid_link_is_400(self, client: AsyncClient, pending: ConsentHarness) -> None:
        response = await client.post(f"{BASE}/verify-email", json={"token": "garbage"})
        assert response.status_code == 400

    async def test_resend(self, client: AsyncClient, pending: ConsentHarness) -> None:
        response = await client.post(
            f"{BASE}/resend-verification",
            json={"primary_email": "a@x.com", "partner_email": "b@x.com"},
        )
        assert response.status_code == 200
        assert response.json()["sent_to"] == ["a***@x.com", "b***@x.com"]
        assert len(pending.notifier.of_kind("verification_link")) == 2

    async def test_resend_rejects_malformed_email(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{BASE}/resend-verification",
            json={"primary_email": "not-an-email", "partner_email": "b@x.com"},
        )
        assert response.status_code == 422
