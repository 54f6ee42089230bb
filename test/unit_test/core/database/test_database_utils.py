"""Unit tests for engine helpers and entity behaviour."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel.pool import StaticPool

from placemaker_ai.core.database import create_all, create_engine, create_sessionmaker
from placemaker_ai.core.database.entities import AnalysisResult, ImageOverlay, Stakeholder


class TestCreateEngine:
    @pytest.mark.parametrize(
        "url",
        [
            "postgres://u:p@db:5432/app",
            "postgresql://u:p@db:5432/app",
            "postgresql+psycopg2://u:p@db:5432/app",
        ],
    )
    def test_postgres_urls_use_asyncpg(self, url):
        engine = create_engine(url)
        assert engine.url.drivername == "postgresql+asyncpg"
        assert engine.url.database == "app"

    def test_sqlite_url_kept(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:")
        assert engine.url.drivername == "sqlite+aiosqlite"


@pytest.mark.asyncio
class TestSqliteForeignKeys:
    async def test_foreign_keys_enforced(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        await create_all(engine)
        try:
            async with create_sessionmaker(engine)() as session:
                session.add(Stakeholder(project_id=424242, name="Orphan"))
                with pytest.raises(IntegrityError):
                    await session.commit()
        finally:
            await engine.dispose()

    async def test_one_analysis_per_project_and_type(self, session, project):
        session.add(AnalysisResult(project_id=project.id, type="full", feedback_hash="a"))
        await session.commit()
        session.add(AnalysisResult(project_id=project.id, type="full", feedback_hash="b"))
        with pytest.raises(IntegrityError):
            await session.commit()


class TestImageOverlayBounds:
    def test_bounds_round_trip(self):
        overlay = ImageOverlay(
            project_id=1, name="Masterplan", image_url="data:", south_lat=51.0, west_lng=-0.2, north_lat=51.1,
            east_lng=-0.1,
        )
        assert overlay.bounds == [[51.0, -0.2], [51.1, -0.1]]

        overlay.set_bounds([[50.0, -1.0], [50.5, -0.5]])

        assert (overlay.south_lat, overlay.west_lng, overlay.north_lat, overlay.east_lng) == (50.0, -1.0, 50.5, -0.5)
