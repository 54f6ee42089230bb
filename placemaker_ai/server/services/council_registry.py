"""
Built-in council registry.

The councils whose member directories the platform knows about. Registry
entries seed the ``councils`` table and let a councillor import create its
council on first use.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database.entities import Council
from placemaker_ai.core.database.repositories import CouncilRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import ImportStatus
from placemaker_ai.core.models.io.councils import CouncilInfo

logger = get_logger(__name__)


def _council(name, mapit_name, type, website, councillors_url, source_type, gss_code) -> CouncilInfo:
    return CouncilInfo(
        name=name,
        mapit_name=mapit_name,
        type=type,
        website=website,
        councillors_url=councillors_url,
        source_type=source_type,
        gss_code=gss_code,
    )


COUNCIL_REGISTRY: List[CouncilInfo] = [
    # London boroughs
    _council(
        "Westminster City Council",
        "Westminster City Council",
        "london_borough",
        "https://www.westminster.gov.uk",
        "https://www.westminster.gov.uk/councillors",
        "westminster",
        "E09000033",
    ),
    _council(
        "Camden Council",
        "Camden",
        "london_borough",
        "https://www.camden.gov.uk",
        "https://democracy.camden.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E09000007",
    ),
    _council(
        "Islington Council",
        "Islington",
        "london_borough",
        "https://www.islington.gov.uk",
        "https://democracy.islington.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E09000019",
    ),
    _council(
        "Hackney Council",
        "Hackney",
        "london_borough",
        "https://hackney.gov.uk",
        "https://mginternet.hackney.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E09000012",
    ),
    _council(
        "Tower Hamlets Council",
        "Tower Hamlets",
        "london_borough",
        "https://www.towerhamlets.gov.uk",
        "https://democracy.towerhamlets.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E09000030",
    ),
    _council(
        "Southwark Council",
        "Southwark",
        "london_borough",
        "https://www.southwark.gov.uk",
        "https://moderngov.southwark.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E09000028",
    ),
    _council(
        "Lambeth Council",
        "Lambeth",
        "london_borough",
        "https://www.lambeth.gov.uk",
        "https://moderngov.lambeth.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E09000022",
    ),
    # District councils
    _council(
        "Mole Valley District Council",
        "Mole Valley District Council",
        "district",
        "https://www.molevalley.gov.uk",
        "https://molevalley.moderngov.co.uk/mgMemberIndex.aspx",
        "moderngov",
        "E07000210",
    ),
    _council(
        "Guildford Borough Council",
        "Guildford",
        "district",
        "https://www.guildford.gov.uk",
        "https://www2.guildford.gov.uk/councilmeetings/mgMemberIndex.aspx",
        "moderngov",
        "E07000209",
    ),
    # Unitary authorities
    _council(
        "Brighton and Hove City Council",
        "Brighton and Hove City Council",
        "unitary",
        "https://www.brighton-hove.gov.uk",
        "https://democracy.brighton-hove.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E06000043",
    ),
    _council(
        "Bristol City Council",
        "Bristol, City of",
        "unitary",
        "https://www.bristol.gov.uk",
        "https://democracy.bristol.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E06000023",
    ),
    # Metropolitan boroughs
    _council(
        "Manchester City Council",
        "Manchester City Council",
        "metropolitan",
        "https://www.manchester.gov.uk",
        "https://democracy.manchester.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E08000003",
    ),
    _council(
        "Birmingham City Council",
        "Birmingham City Council",
        "metropolitan",
        "https://www.birmingham.gov.uk",
        "https://birmingham.cmis.uk.com/birmingham/Councillors.aspx",
        "moderngov",
        "E08000025",
    ),
    _council(
        "Leeds City Council",
        "Leeds City Council",
        "metropolitan",
        "https://www.leeds.gov.uk",
        "https://democracy.leeds.gov.uk/mgMemberIndex.aspx",
        "moderngov",
        "E08000035",
    ),
]


def find_registry_council(name: str) -> Optional[CouncilInfo]:
    """Registry entry whose name or MapIt name equals ``name``, ignoring case."""
    lowered = name.lower()
    for info in COUNCIL_REGISTRY:
        if info.name.lower() == lowered or info.mapit_name.lower() == lowered:
            return info
    return None


def _from_registry(info: CouncilInfo) -> Council:
    return Council(**info.model_dump(), import_status=ImportStatus.pending.value)


async def init_councils(session: AsyncSession) -> int:
    """Create every registry council missing from the database.

    Returns:
        Number of councils created
    """
    repo = CouncilRepository(session)
    created = 0
    for info in COUNCIL_REGISTRY:
        if await repo.get_by_name(info.name) is None:
            session.add(_from_registry(info))
            created += 1
    await session.commit()
    logger.info(f"Initialised {created} council(s) from the registry")
    return created


async def resolve_council(session: AsyncSession, name: str) -> Optional[Council]:
    """Council stored under ``name``, created from the registry when only the registry knows it."""
    repo = CouncilRepository(session)
    council = await repo.get_by_name(name)
    if council is not None:
        return council
    info = find_registry_council(name)
    if info is None:
        return None
    council = await repo.get_by_name(info.name)
    if council is not None:
        return council
    return await repo.create(_from_registry(info))
