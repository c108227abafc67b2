"""Pytest configuration and fixtures for duet.

Required secrets are set before app.main is imported (settings validate on
first use). HTTP tests run against app.main:app with repositories, unit of
work, and email dispatch overridden by the in-memory fakes in tests.fakes.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef0123456789")
os.environ.setdefault("ENCRYPTION_SALT", "test-encryption-salt")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.api.v1.dependencies import (  # noqa: E402
    clear_security_caches,
    get_account_repo,
    get_code_service,
    get_deletion_request_repo,
    get_notification_dispatcher,
    get_password_hasher,
    get_password_reset_repo,
    get_secret_cipher,
    get_secret_handoff_repo,
    get_token_signer,
    get_uow,
)
from app.core.config import get_settings  # noqa: E402
from app.core.limiter import limiter, reset_rate_windows  # noqa: E402
from app.infrastructure.persistence import database  # noqa: E402
from app.main import app  # noqa: E402
from tests.fakes import ConsentHarness  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_rate_windows():
    """Per-email reset windows are process-wide; start every test empty."""
    reset_rate_windows()
    yield
    reset_rate_windows()


@pytest.fixture
def harness() -> ConsentHarness:
    """Consent services over one in-memory store, with a fixed clock and recording notifier."""
    return ConsentHarness()


@pytest.fixture
async def client(harness: ConsentHarness) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), wired to the harness fakes.

    IP rate limits are disabled; tests that exercise them turn the limiter on.
    """
    get_settings.cache_clear()
    clear_security_caches()
    app.dependency_overrides.update(
        {
            get_account_repo: lambda: harness.accounts,
            get_password_reset_repo: lambda: harness.reset_requests,
            get_deletion_request_repo: lambda: harness.deletion_requests,
            get_secret_handoff_repo: lambda: harness.handoffs,
            get_uow: lambda: harness.uow,
            get_notification_dispatcher: lambda: harness.notifier,
            get_code_service: lambda: harness.codes,
            get_password_hasher: lambda: harness.hasher,
            get_token_signer: lambda: harness.signer,
            get_secret_cipher: lambda: harness.cipher,
        }
    )
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository integration tests.

    Writes made through SqlAlchemyUnitOfWork commit, so tests use unique keys.

    Requires DATABASE_URL. Skips (pytest.skip) when it is not configured. Use
    @pytest.mark.requires_db to mark tests that need this fixture; run
    without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Database not configured: set DATABASE_URL "
            "(e.g. sqlite+aiosqlite:///./test.db or postgresql+asyncpg://...)"
        )
    from app.infrastructure.persistence import models  # noqa: F401

    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
