"""Database and external-service fixtures shared by the unit tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

from placemaker_ai.core.database import create_all, create_engine, create_sessionmaker
from placemaker_ai.core.database.entities import Project, TeamMember, User
from placemaker_ai.integrations.civic import CivicDataClient
from placemaker_ai.integrations.email import ResendClient
from placemaker_ai.server.core.config import CivicDataConfig, EmailConfig

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(name="engine")
async def engine_fixture():
    """A fresh in-memory database per test, with every table created."""
    engine = create_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(engine)() as session:
        yield session


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession) -> User:
    user = User(email="admin@example.com", name="Ada Admin", system_role="SUPER_ADMIN")
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def project(session: AsyncSession) -> Project:
    project = Project(
        name="Riverside Regeneration",
        description="New homes and a riverside park",
        latitude=51.5014,
        longitude=-0.1419,
        email_from_name="Riverside Team",
        email_from_address="riverside@example.com",
    )
    session.add(project)
    await session.commit()
    await session.refresh(project)
    return project


@pytest_asyncio.fixture
async def team_member(session: AsyncSession, project: Project) -> TeamMember:
    member = TeamMember(project_id=project.id, name="Tom Planner", email="tom@example.com", role="Planner")
    session.add(member)
    await session.commit()
    await session.refresh(member)
    return member


# ---------------------------------------------------------------------------
# Fake civic-data APIs
# ---------------------------------------------------------------------------

MOCK_POSTCODES_URL = "http://mock-postcodes"
MOCK_PARLIAMENT_URL = "http://mock-parliament"
MOCK_MAPIT_URL = "http://mock-mapit"


@dataclass
class FakeCivicApi:
    """In-process stand-in for postcodes.io, the Parliament API and MapIt.

    Set ``postcode``, ``mp`` and ``areas`` to shape the answers; names listed
    in ``failing`` answer with HTTP 503.
    """

    postcode: Optional[str] = "SW1A 1AA"
    mp: Optional[Dict[str, Any]] = field(
        default_factory=lambda: {
            "id": 4514,
            "nameDisplayAs": "Jane Member",
            "latestParty": {"name": "Independent"},
            "latestHouseMembership": {"membershipFrom": "Cities of London and Westminster"},
        }
    )
    areas: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: {
            "2504": {"name": "Westminster City Council", "type": "LBO"},
            "8292": {"name": "St James's", "type": "LBW"},
        }
    )
    failing: List[str] = field(default_factory=list)
    requests: List[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == "mock-postcodes":
            if "postcodes" in self.failing:
                return httpx.Response(503, text="unavailable")
            result = [{"postcode": self.postcode}] if self.postcode else None
            return httpx.Response(200, json={"status": 200, "result": result})
        if host == "mock-parliament":
            if "parliament" in self.failing:
                return httpx.Response(503, text="unavailable")
            items = [{"value": self.mp}] if self.mp else []
            return httpx.Response(200, json={"items": items, "totalResults": len(items)})
        if host == "mock-mapit":
            if "mapit" in self.failing:
                return httpx.Response(503, text="unavailable")
            return httpx.Response(200, json=self.areas)
        return httpx.Response(404)


@pytest.fixture
def civic_api() -> FakeCivicApi:
    return FakeCivicApi()


@pytest_asyncio.fixture
async def civic_client(civic_api: FakeCivicApi) -> AsyncGenerator[CivicDataClient, None]:
    config = CivicDataConfig(
        postcodes_url=MOCK_POSTCODES_URL,
        parliament_url=MOCK_PARLIAMENT_URL,
        mapit_url=MOCK_MAPIT_URL,
        timeout=5.0,
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(civic_api.handler)) as http:
        yield CivicDataClient(config, client=http)


# ---------------------------------------------------------------------------
# Fake email provider
# ---------------------------------------------------------------------------

MOCK_RESEND_URL = "http://mock-resend"


@dataclass
class Outbox:
    """Messages accepted by the fake email provider."""

    messages: List[Dict[str, Any]] = field(default_factory=list)
    fail_with: Optional[int] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "rejected"})
        self.messages.append(json.loads(request.content))
        return httpx.Response(200, json={"id": f"msg_{len(self.messages)}"})

    def to(self, address: str) -> List[Dict[str, Any]]:
        return [m for m in self.messages if address in m["to"]]


@pytest.fixture
def outbox() -> Outbox:
    return Outbox()


def email_config(api_key: Optional[str] = "re_test_key") -> EmailConfig:
    return EmailConfig(
        api_key=api_key,
        api_url=MOCK_RESEND_URL,
        default_from="Placemaker.ai <noreply@example.com>",
        webhook_secret=None,
    )


@pytest_asyncio.fixture
async def email_client(outbox: Outbox) -> AsyncGenerator[ResendClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(outbox.handler)) as http:
        yield ResendClient(email_config(), client=http)
