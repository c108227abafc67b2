"""HTTP tests for GET /api/v1/password-shares/{token}."""

from httpx import AsyncClient

from app.application.services.secret_handoff_service import SecretHandoffService
from tests.fakes import ConsentHarness, make_account


async def test_share_is_served_once(client: AsyncClient, harness: ConsentHarness) -> None:
    harness.accounts.seed(make_account())
    # Wall clock, like the service the app builds.
    handoffs = SecretHandoffService(harness.handoffs, harness.cipher, harness.uow)
    issued = await handoffs.issue("acct-1", "b@x.com", "NewPass123!")

    first = await client.get(f"/api/v1/password-shares/{issued.token}")
    assert first.status_code == 200
    assert first.json() == {"password": "NewPass123!"}
    assert first.headers["cache-control"] == "no-store"

    second = await client.get(f"/api/v1/password-shares/{issued.token}")
    assert second.status_code == 410
    assert second.json()["error"] == "ALREADY_USED"
    assert "NewPass123!" not in second.text


async def test_unknown_share_is_404(client: AsyncClient) -> None:
    response = await client.get(f"/api/v1/password-shares/{'z' * 43}")
    assert response.status_code == 404
    assert response.json()["error"] == "NOT_FOUND"
