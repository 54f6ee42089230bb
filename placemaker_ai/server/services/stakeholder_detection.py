"""
Stakeholder auto-detection.

Chains four lookups for a map location:

1. postcodes.io: nearest postcode.
2. UK Parliament members API: the current MP for that postcode.
3. MapIt: the council, ward and parish councils containing the point.
4. Councillor database: the councillors for the council and ward.

Every step logs its failure and carries on with whatever the earlier steps
found, so a partial answer is always returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database.entities import Councillor, Stakeholder
from placemaker_ai.core.database.repositories import CouncilRepository, StakeholderRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import StakeholderCategory, StakeholderType
from placemaker_ai.core.models.io.stakeholders import DetectedStakeholder, DetectionLocation
from placemaker_ai.core.monitoring import log_external_lookup
from placemaker_ai.integrations.civic import AreaLookup, CivicDataClient, CivicDataError, MemberDTO
from placemaker_ai.server.core import constant

logger = get_logger(__name__)

PARLIAMENT_SOURCE = "UK Parliament API"
MAPIT_SOURCE = "MapIt API"
COUNCILLOR_SOURCE = "Councillor Database"


@dataclass
class DetectionResult:
    """Everything auto-detection found for one location."""

    location: DetectionLocation
    stakeholders: List[DetectedStakeholder] = field(default_factory=list)
    councillor_data_available: bool = False

    @property
    def note(self) -> Optional[str]:
        council = self.location.council
        if self.councillor_data_available or not council:
            return None
        return (
            f"Councillor names not in database for {council}. "
            f'POST to {constant.API_V1_STR}/councils/import with {{"council": "{council}", "councillors": [...]}} '
            "to populate."
        )


def mp_stakeholder(member: MemberDTO) -> DetectedStakeholder:
    return DetectedStakeholder(
        name=member.name_display_as,
        organization=member.latest_party.name if member.latest_party else "Parliament",
        role=f"MP for {member.constituency or 'Unknown Constituency'}",
        type=StakeholderType.political.value,
        source=PARLIAMENT_SOURCE,
        notes=f"Member of Parliament. Contact via: {member.contact_url}",
    )


def parish_stakeholder(parish: str) -> DetectedStakeholder:
    return DetectedStakeholder(
        name=f"{parish} Parish Council",
        organization=parish,
        role="Parish Council",
        type=StakeholderType.community_org.value,
        source=MAPIT_SOURCE,
        notes=(
            "Parish councils handle local matters. "
            f'Search "{parish} Parish Council" to find contact details and meeting schedules.'
        ),
    )


def councillor_notes(councillor: Councillor) -> Optional[str]:
    if councillor.party:
        notes = f"{councillor.party} councillor."
        if councillor.profile_url:
            notes += f" Profile: {councillor.profile_url}"
        return notes
    if councillor.profile_url:
        return f"Profile: {councillor.profile_url}"
    return None


def councillor_stakeholder(councillor: Councillor, council_name: str) -> DetectedStakeholder:
    return DetectedStakeholder(
        name=f"Cllr {councillor.name}",
        organization=council_name,
        role=f"Councillor for {councillor.ward_name} Ward",
        type=StakeholderType.political.value,
        source=COUNCILLOR_SOURCE,
        notes=councillor_notes(councillor),
        email=councillor.email,
    )


async def detect_stakeholders(
    latitude: float,
    longitude: float,
    civic: CivicDataClient,
    councils: CouncilRepository,
) -> DetectionResult:
    """Run every lookup for a location without touching the project's stakeholders.

    Args:
        latitude: Point latitude (WGS84)
        longitude: Point longitude (WGS84)
        civic: Client for the civic-data APIs
        councils: Repository used for the councillor lookup

    Returns:
        DetectionResult with the proposed stakeholders and what was searched
    """
    result = DetectionResult(location=DetectionLocation(latitude=latitude, longitude=longitude))

    try:
        result.location.postcode = await civic.postcode_for_point(latitude, longitude)
        log_external_lookup("postcodes", ok=result.location.postcode is not None, detail=result.location.postcode)
    except CivicDataError as e:
        logger.error(f"Error fetching postcode: {e}")
        log_external_lookup("postcodes", ok=False, detail=str(e))

    if result.location.postcode:
        try:
            member = await civic.current_mp_for_postcode(result.location.postcode)
            if member is not None:
                result.stakeholders.append(mp_stakeholder(member))
            log_external_lookup("parliament", ok=member is not None)
        except CivicDataError as e:
            logger.error(f"Error fetching MP data: {e}")
            log_external_lookup("parliament", ok=False, detail=str(e))

    areas = AreaLookup()
    try:
        areas = await civic.area_lookup(latitude, longitude)
        log_external_lookup("mapit", ok=areas.council is not None, detail=areas.council)
    except CivicDataError as e:
        logger.error(f"Error fetching MapIt data: {e}")
        log_external_lookup("mapit", ok=False, detail=str(e))
    result.location.council = areas.council
    result.location.ward = areas.ward
    result.stakeholders.extend(parish_stakeholder(parish) for parish in areas.parishes)

    if areas.council and areas.ward:
        try:
            councillors = await councils.find_councillors(areas.council, areas.ward)
        except Exception as e:
            logger.error(f"Error looking up councillors: {e}", exc_info=True)
            councillors = []
        if councillors:
            result.councillor_data_available = True
            result.stakeholders.extend(councillor_stakeholder(c, areas.council) for c in councillors)

    logger.info(
        f"Detected {len(result.stakeholders)} stakeholder(s) at ({latitude}, {longitude}): "
        f"postcode={result.location.postcode}, council={result.location.council}, ward={result.location.ward}"
    )
    return result


async def persist_detected(
    session: AsyncSession, project_id: int, detected: List[DetectedStakeholder]
) -> Tuple[List[str], List[str]]:
    """Store detected stakeholders, skipping any already recorded under the same name and organisation.

    Returns:
        Tuple of (created names, skipped names)
    """
    repo = StakeholderRepository(session)
    created: List[str] = []
    skipped: List[str] = []
    for candidate in detected:
        if await repo.exists(project_id, candidate.name, candidate.organization):
            skipped.append(candidate.name)
            continue
        political = candidate.type == StakeholderType.political.value
        session.add(
            Stakeholder(
                project_id=project_id,
                name=candidate.name,
                organization=candidate.organization,
                role=candidate.role,
                type=candidate.type,
                category=(StakeholderCategory.supporter if political else StakeholderCategory.unknown).value,
                notes=candidate.notes or f"Auto-detected from {candidate.source}",
                email=candidate.email,
                influence=4 if political else 3,
                interest=3,
            )
        )
        # Later candidates in the batch must see this row in ``exists``
        await session.flush()
        created.append(candidate.name)
    await session.commit()
    return created, skipped
