"""API test fixtures: the app wired to the per-test SQLite database."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from payslip_engine.api.app import create_app
from payslip_engine.api.dependencies import (
    get_bootstrap_deductions,
    get_db_session,
    get_mail_transport,
)
from payslip_engine.database import make_session_factory
from payslip_engine.notifications import StubMailTransport


@pytest.fixture
async def client(
    engine: AsyncEngine,
    mail_transport: StubMailTransport,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    session_factory = make_session_factory(engine)

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_mail_transport] = lambda: mail_transport
    app.dependency_overrides[get_bootstrap_deductions] = lambda: True

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
