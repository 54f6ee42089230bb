from typing import AsyncGenerator, Dict
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.analytics import FeedbackAnalyzer
from placemaker_ai.core.database.entities import User
from placemaker_ai.integrations.civic import CivicDataClient
from placemaker_ai.integrations.email import ResendClient


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, civic_client: CivicDataClient, email_client: ResendClient
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from placemaker_ai.core.database import get_session
    from placemaker_ai.server.main import app
    from placemaker_ai.server.services.deps import get_civic_client, get_email_client, get_feedback_analyzer

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_civic_client] = lambda: civic_client
    app.dependency_overrides[get_email_client] = lambda: email_client
    app.dependency_overrides[get_feedback_analyzer] = lambda: FeedbackAnalyzer()

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("placemaker_ai.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return {"X-User-Id": str(admin_user.id)}


@pytest_asyncio.fixture
async def client_user(session: AsyncSession) -> User:
    user = User(email="client@example.com", name="Cleo Client", system_role="USER")
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
def client_headers(client_user: User) -> Dict[str, str]:
    return {"X-User-Id": str(client_user.id)}
