"""Unit tests for the built-in council registry."""

import pytest
from sqlmodel import select

from placemaker_ai.core.database.entities import Council
from placemaker_ai.server.services.council_registry import (
    COUNCIL_REGISTRY,
    find_registry_council,
    init_councils,
    resolve_council,
)


class TestRegistry:
    def test_registry_names_are_unique(self):
        names = [info.name for info in COUNCIL_REGISTRY]
        assert len(names) == len(set(names)) == 14

    @pytest.mark.parametrize("name", ["Camden Council", "camden", "CAMDEN"])
    def test_find_by_name_or_mapit_name(self, name):
        assert find_registry_council(name).name == "Camden Council"

    def test_unknown_council(self):
        assert find_registry_council("Atlantis Borough Council") is None


@pytest.mark.asyncio
class TestInitCouncils:
    async def test_creates_missing_councils_once(self, session):
        session.add(Council(name="Westminster City Council"))
        await session.commit()

        assert await init_councils(session) == 13
        assert await init_councils(session) == 0

        councils = (await session.exec(select(Council))).all()
        assert len(councils) == 14
        camden = next(c for c in councils if c.name == "Camden Council")
        assert camden.mapit_name == "Camden"
        assert camden.import_status == "pending"


@pytest.mark.asyncio
class TestResolveCouncil:
    async def test_existing_council(self, session):
        council = Council(name="Somewhere Council")
        session.add(council)
        await session.commit()
        assert (await resolve_council(session, "Somewhere Council")).id == council.id

    async def test_created_from_registry(self, session):
        council = await resolve_council(session, "camden")
        assert council.id is not None
        assert council.name == "Camden Council"
        assert (await resolve_council(session, "Camden")).id == council.id

    async def test_unknown(self, session):
        assert await resolve_council(session, "Atlantis") is None
