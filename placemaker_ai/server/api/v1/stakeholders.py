"""
API endpoints for stakeholders and their engagement log.

Stakeholders are people and organisations with an interest in a project.
Each carries a log of engagements (meetings, calls, emails...). Besides
manual entry, stakeholders can be auto-detected from the project location:
the MP, ward councillors and parish councils for the site.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import Enquiry, Stakeholder, StakeholderEngagement
from placemaker_ai.core.database.repositories import CouncilRepository, StakeholderRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.io.stakeholders import (
    AutoDetectDetails,
    AutoDetectResponse,
    EngagementCreate,
    EngagementRead,
    EngagementUpdate,
    PreviewDetectRequest,
    PreviewDetectResponse,
    RelatedEnquiry,
    StakeholderCreate,
    StakeholderDetailRead,
    StakeholderRead,
    StakeholderUpdate,
)
from placemaker_ai.server.auth import ProjectDep
from placemaker_ai.server.services.deps import CivicClientDep
from placemaker_ai.server.services.stakeholder_detection import detect_stakeholders, persist_detected

logger = get_logger(__name__)

router = APIRouter(tags=["stakeholders"])
preview_router = APIRouter(tags=["stakeholders"])


async def _get_stakeholder(session: AsyncSession, project_id: int, stakeholder_id: int) -> Stakeholder:
    stakeholder = await StakeholderRepository(session).get_for_project(project_id, stakeholder_id)
    if not stakeholder:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Stakeholder {stakeholder_id} not found",
        )
    return stakeholder


async def _get_engagement(session: AsyncSession, stakeholder_id: int, engagement_id: int) -> StakeholderEngagement:
    engagement = await session.get(StakeholderEngagement, engagement_id)
    if not engagement or engagement.stakeholder_id != stakeholder_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Engagement {engagement_id} not found",
        )
    return engagement


@router.get(
    "/{project_id}/stakeholders",
    response_model=List[StakeholderRead],
    summary="List Stakeholders",
    description="List the project's stakeholders, newest first, optionally filtered by category or type.",
    response_description="A list of stakeholders.",
)
async def list_stakeholders(
    ctx: ProjectDep,
    category: Optional[str] = None,
    stakeholder_type: Optional[str] = Query(default=None, alias="type"),
    session: AsyncSession = Depends(get_session),
) -> List[StakeholderRead]:
    """
    List stakeholders.

    - **category**: Optional filter (supporter, neutral, opponent, unknown).
    - **type**: Optional filter (political, community_org, ...).
    """
    statement = select(Stakeholder).where(Stakeholder.project_id == ctx.project_id)
    if category:
        statement = statement.where(Stakeholder.category == category)
    if stakeholder_type:
        statement = statement.where(Stakeholder.type == stakeholder_type)
    statement = statement.order_by(Stakeholder.created_at.desc(), Stakeholder.id.desc())
    result = await session.exec(statement)
    return [StakeholderRead.model_validate(s) for s in result.all()]


@router.post(
    "/{project_id}/stakeholders",
    response_model=StakeholderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Stakeholder",
    description="Add a stakeholder to the project. Category defaults to neutral.",
    response_description="The created stakeholder.",
)
async def create_stakeholder(
    data: StakeholderCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> StakeholderRead:
    """
    Create a stakeholder.

    - **name**: Person or organisation name.
    - **category**: supporter, neutral (default), opponent or unknown.
    - **influence** / **interest**: Optional 1-5 scores for the power/interest grid.
    """
    stakeholder = Stakeholder(project_id=ctx.project_id, **data.model_dump())
    stakeholder = await StakeholderRepository(session).create(stakeholder)
    return StakeholderRead.model_validate(stakeholder)


@router.get(
    "/{project_id}/stakeholders/{stakeholder_id}",
    response_model=StakeholderDetailRead,
    summary="Get Stakeholder",
    description="Retrieve a stakeholder with its engagements (newest first) and the enquiries sent from its email.",
    response_description="The stakeholder with engagements and related enquiries.",
    responses={404: {"description": "Stakeholder not found"}},
)
async def get_stakeholder(
    stakeholder_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> StakeholderDetailRead:
    """
    Get stakeholder by ID.

    - **stakeholder_id**: The unique identifier of the stakeholder.
    """
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    engagements = await StakeholderRepository(session).engagements(stakeholder.id)

    related: List[Enquiry] = []
    if stakeholder.email:
        statement = (
            select(Enquiry)
            .where(
                Enquiry.project_id == ctx.project_id,
                func.lower(Enquiry.submitter_email) == stakeholder.email.lower(),
            )
            .order_by(Enquiry.created_at.desc())
        )
        related = list((await session.exec(statement)).all())

    return StakeholderDetailRead(
        **StakeholderRead.model_validate(stakeholder).model_dump(),
        engagements=[EngagementRead.model_validate(e) for e in engagements],
        related_enquiries=[RelatedEnquiry.model_validate(e) for e in related],
    )


@router.patch(
    "/{project_id}/stakeholders/{stakeholder_id}",
    response_model=StakeholderRead,
    summary="Update Stakeholder",
    description="Partially update a stakeholder. Only provided fields are updated.",
    response_description="The updated stakeholder.",
    responses={404: {"description": "Stakeholder not found"}},
)
async def update_stakeholder(
    stakeholder_id: int,
    data: StakeholderUpdate,
    ctx: ProjectDep,
    session: AsyncSession = Depends(get_session),
) -> StakeholderRead:
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(stakeholder, key, value)
    stakeholder = await StakeholderRepository(session).update(stakeholder)
    return StakeholderRead.model_validate(stakeholder)


@router.delete(
    "/{project_id}/stakeholders/{stakeholder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Stakeholder",
    description="Delete a stakeholder and its engagement log.",
    responses={404: {"description": "Stakeholder not found"}},
)
async def delete_stakeholder(
    stakeholder_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> None:
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    await session.delete(stakeholder)
    await session.commit()


@router.get(
    "/{project_id}/stakeholders/{stakeholder_id}/engagements",
    response_model=List[EngagementRead],
    summary="List Engagements",
    description="List a stakeholder's engagements, newest first.",
    response_description="A list of engagements.",
    responses={404: {"description": "Stakeholder not found"}},
)
async def list_engagements(
    stakeholder_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> List[EngagementRead]:
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    engagements = await StakeholderRepository(session).engagements(stakeholder.id)
    return [EngagementRead.model_validate(e) for e in engagements]


@router.post(
    "/{project_id}/stakeholders/{stakeholder_id}/engagements",
    response_model=EngagementRead,
    status_code=status.HTTP_201_CREATED,
    summary="Log Engagement",
    description="Record a contact with a stakeholder. The date defaults to now.",
    response_description="The created engagement.",
    responses={404: {"description": "Stakeholder not found"}},
)
async def create_engagement(
    stakeholder_id: int,
    data: EngagementCreate,
    ctx: ProjectDep,
    session: AsyncSession = Depends(get_session),
) -> EngagementRead:
    """
    Log an engagement.

    - **type**: meeting, call, email, inbound_email, outbound_email, event, letter or other.
    - **title**: Short summary.
    - **date**: When it happened; defaults to now.
    """
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    values = data.model_dump(exclude_none=True)
    engagement = StakeholderEngagement(stakeholder_id=stakeholder.id, **values)
    session.add(engagement)
    await session.commit()
    await session.refresh(engagement)
    return EngagementRead.model_validate(engagement)


@router.patch(
    "/{project_id}/stakeholders/{stakeholder_id}/engagements/{engagement_id}",
    response_model=EngagementRead,
    summary="Update Engagement",
    description="Partially update an engagement.",
    response_description="The updated engagement.",
    responses={404: {"description": "Stakeholder or engagement not found"}},
)
async def update_engagement(
    stakeholder_id: int,
    engagement_id: int,
    data: EngagementUpdate,
    ctx: ProjectDep,
    session: AsyncSession = Depends(get_session),
) -> EngagementRead:
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    engagement = await _get_engagement(session, stakeholder.id, engagement_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(engagement, key, value)
    session.add(engagement)
    await session.commit()
    await session.refresh(engagement)
    return EngagementRead.model_validate(engagement)


@router.delete(
    "/{project_id}/stakeholders/{stakeholder_id}/engagements/{engagement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Engagement",
    description="Remove an engagement from a stakeholder's log.",
    responses={404: {"description": "Stakeholder or engagement not found"}},
)
async def delete_engagement(
    stakeholder_id: int,
    engagement_id: int,
    ctx: ProjectDep,
    session: AsyncSession = Depends(get_session),
) -> None:
    stakeholder = await _get_stakeholder(session, ctx.project_id, stakeholder_id)
    engagement = await _get_engagement(session, stakeholder.id, engagement_id)
    await session.delete(engagement)
    await session.commit()


@router.post(
    "/{project_id}/stakeholders/auto-detect",
    response_model=AutoDetectResponse,
    summary="Auto-detect Stakeholders",
    description=(
        "Look up the MP, ward councillors and parish councils for the project location "
        "and add any not already recorded."
    ),
    response_description="Counts and names of created and skipped stakeholders, with what was searched.",
    responses={
        200: {"description": "Detection completed (external lookups that fail are skipped)"},
        400: {"description": "Project location not set"},
    },
)
async def auto_detect_stakeholders(
    ctx: ProjectDep,
    civic: CivicClientDep,
    session: AsyncSession = Depends(get_session),
) -> AutoDetectResponse:
    """
    Auto-detect stakeholders for the project location.

    Chains a postcode lookup, an MP lookup, a MapIt area lookup and a
    councillor database match. Each failing step is logged and skipped.
    Stakeholders already recorded under the same name and organisation are
    skipped.
    """
    project = ctx.project
    if project.latitude is None or project.longitude is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project location not set. Please save a map location first.",
        )

    result = await detect_stakeholders(project.latitude, project.longitude, civic, CouncilRepository(session))
    created, skipped = await persist_detected(session, ctx.project_id, result.stakeholders)
    logger.info(f"Auto-detect for project {ctx.project_id}: created={len(created)}, skipped={len(skipped)}")

    return AutoDetectResponse(
        message=f"Auto-detected {len(result.stakeholders)} potential stakeholders",
        created=len(created),
        skipped=len(skipped),
        details=AutoDetectDetails(
            created=created,
            skipped=skipped,
            searched=result.location,
            councillor_data_available=result.councillor_data_available,
            note=result.note,
        ),
    )


@preview_router.post(
    "/preview-detect",
    response_model=PreviewDetectResponse,
    summary="Preview Stakeholder Detection",
    description="Run stakeholder detection for a location without a project and without saving anything.",
    response_description="The stakeholders that would be detected and the location searched.",
    responses={400: {"description": "Latitude or longitude missing"}},
)
async def preview_detect_stakeholders(
    data: PreviewDetectRequest,
    civic: CivicClientDep,
    session: AsyncSession = Depends(get_session),
) -> PreviewDetectResponse:
    """
    Preview detection.

    - **latitude**: Point latitude (WGS84), required.
    - **longitude**: Point longitude (WGS84), required.
    """
    if data.latitude is None or data.longitude is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Latitude and longitude are required",
        )
    result = await detect_stakeholders(data.latitude, data.longitude, civic, CouncilRepository(session))
    return PreviewDetectResponse(
        stakeholders=result.stakeholders,
        location=result.location,
        councillor_data_available=result.councillor_data_available,
    )
