"""
Public embed endpoints.

These routes back the map widget that projects embed on their own sites.
They need no sign-in; a project must have embedding enabled. Visitors can
view the map, drop pins or draw shapes with a comment, upvote pins and send
an enquiry to the project team.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session, utc_now
from placemaker_ai.core.database.entities import Enquiry, ImageOverlay, Project, PublicPin, TeamMember, Tour
from placemaker_ai.core.database.repositories import StakeholderRepository, SubscriberRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import EngagementType, PinCategory, ShapeType, SubscriberSource
from placemaker_ai.core.models.io.embed import EmbedProject, EmbedRead
from placemaker_ai.core.models.io.enquiries import PublicEnquiryResponse, PublicEnquirySubmit
from placemaker_ai.core.models.io.feedback import PinSubmit, PinVoteResponse, PublicPinRead
from placemaker_ai.core.models.io.map_data import OverlayRead
from placemaker_ai.integrations.email import send_quietly
from placemaker_ai.integrations.email.templates import new_enquiry_email
from placemaker_ai.server.services.deps import EmailClientDep
from placemaker_ai.server.services.links import enquiry_link

from .tours import ordered_stops, tour_read

logger = get_logger(__name__)

router = APIRouter(tags=["embed"])

COMMENT_LIMIT = 2000
NAME_LIMIT = 100
EMAIL_LIMIT = 255

_SHAPE_TYPES = {s.value for s in ShapeType}
_CATEGORIES = {c.value for c in PinCategory}


async def _embeddable_project(session: AsyncSession, project_id: int, disabled_detail: str) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    if not project.embed_enabled:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=disabled_detail)
    return project


def _clip(value: Optional[str], limit: int) -> Optional[str]:
    return value[:limit] if value else None


def _valid_geometry(geometry: Optional[Dict[str, Any]]) -> bool:
    return bool(geometry) and bool(geometry.get("type")) and isinstance(geometry.get("coordinates"), list)


@router.get(
    "/{project_id}",
    response_model=EmbedRead,
    summary="Get Embed Data",
    description=(
        "Everything the public map needs: public project fields, visible overlays, approved "
        "pins and the first active tour."
    ),
    response_description="Public map data.",
    responses={
        403: {"description": "Embedding disabled"},
        404: {"description": "Project not found"},
    },
)
async def get_embed(project_id: int, session: AsyncSession = Depends(get_session)) -> EmbedRead:
    project = await _embeddable_project(session, project_id, "Embedding not enabled for this project")

    overlays = await session.exec(
        select(ImageOverlay)
        .where(ImageOverlay.project_id == project.id, ImageOverlay.visible == True)  # noqa: E712
        .order_by(ImageOverlay.created_at, ImageOverlay.id)
    )
    pins = await session.exec(
        select(PublicPin)
        .where(PublicPin.project_id == project.id, PublicPin.approved == True)  # noqa: E712
        .order_by(PublicPin.created_at.desc(), PublicPin.id.desc())
    )
    tour = (
        await session.exec(
            select(Tour)
            .where(Tour.project_id == project.id, Tour.active == True)  # noqa: E712
            .order_by(Tour.created_at, Tour.id)
        )
    ).first()

    tour_data = None
    if tour is not None:
        stops = await ordered_stops(session, [tour.id])
        tour_data = tour_read(tour, stops[tour.id])

    return EmbedRead(
        project=EmbedProject.model_validate(project, from_attributes=True),
        overlays=[OverlayRead.model_validate(o) for o in overlays.all()],
        pins=[PublicPinRead.model_validate(p, from_attributes=True) for p in pins.all()],
        tour=tour_data,
    )


@router.post(
    "/{project_id}/pins",
    response_model=PublicPinRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Feedback",
    description=(
        "Drop a pin or draw a line or polygon with a comment. Unknown shape types fall back to "
        "pin and unknown categories to comment."
    ),
    response_description="The stored feedback, without contact details.",
    responses={
        400: {"description": "Required fields, geometry or GDPR consent missing"},
        403: {"description": "Embedding disabled"},
        404: {"description": "Project not found"},
    },
)
async def submit_pin(project_id: int, data: PinSubmit, session: AsyncSession = Depends(get_session)) -> PublicPinRead:
    """
    Submit map feedback.

    - **shape_type**: pin (default), line or polygon.
    - **latitude**, **longitude**: Required for pins.
    - **geometry**: GeoJSON geometry, required for lines and polygons.
    - **category**: positive, negative, question or comment (default).
    - **comment**: Required.
    - **gdpr_consent**: Must be true.
    - **mailing_consent**: With an email, adds the visitor to the mailing list.
    """
    project = await _embeddable_project(session, project_id, "Feedback not enabled for this project")

    shape_type = data.shape_type if data.shape_type in _SHAPE_TYPES else ShapeType.pin.value
    if shape_type == ShapeType.pin.value:
        if data.latitude is None or data.longitude is None or not data.comment:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing required fields for pin: latitude, longitude, comment",
            )
    else:
        if not data.geometry or not data.comment:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing required fields for shape: geometry, comment",
            )
        if not _valid_geometry(data.geometry):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid geometry format. Expected GeoJSON with type and coordinates",
            )
    category = data.category if data.category in _CATEGORIES else PinCategory.comment.value
    if not data.gdpr_consent:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="GDPR consent is required")

    is_pin = shape_type == ShapeType.pin.value
    pin = PublicPin(
        project_id=project.id,
        shape_type=shape_type,
        latitude=data.latitude if is_pin else None,
        longitude=data.longitude if is_pin else None,
        geometry=None if is_pin else data.geometry,
        category=category,
        comment=data.comment[:COMMENT_LIMIT],
        name=_clip(data.name, NAME_LIMIT),
        email=_clip(data.email, EMAIL_LIMIT),
        gdpr_consent=True,
        gdpr_consent_date=utc_now(),
        mailing_consent=data.mailing_consent,
    )
    session.add(pin)
    await session.commit()
    await session.refresh(pin)

    if pin.email and data.mailing_consent:
        await SubscriberRepository(session).subscribe(
            project.id,
            pin.email,
            name=pin.name,
            source=SubscriberSource.public_pin.value,
            source_id=pin.id,
        )
        await session.refresh(pin)
    logger.info(f"Public {shape_type} {pin.id} submitted to project {project.id}")
    return PublicPinRead.model_validate(pin, from_attributes=True)


@router.post(
    "/{project_id}/pins/{pin_id}/vote",
    response_model=PinVoteResponse,
    summary="Upvote Pin",
    description="Add one vote to a pin.",
    response_description="The pin's vote count.",
    responses={
        403: {"description": "Embedding disabled"},
        404: {"description": "Project or pin not found"},
    },
)
async def vote_pin(project_id: int, pin_id: int, session: AsyncSession = Depends(get_session)) -> PinVoteResponse:
    project = await _embeddable_project(session, project_id, "Voting not enabled for this project")
    pin = await session.get(PublicPin, pin_id)
    if not pin or pin.project_id != project.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pin not found")
    pin.votes = PublicPin.votes + 1
    session.add(pin)
    await session.commit()
    await session.refresh(pin)
    return PinVoteResponse(id=pin.id, votes=pin.votes)


@router.post(
    "/{project_id}/enquiries",
    response_model=PublicEnquiryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Enquiry",
    description=(
        "Send an enquiry to the project team. The team is notified by email and the enquiry is "
        "logged on the submitter's stakeholder record, when there is one."
    ),
    response_description="The enquiry reference.",
    responses={
        400: {"description": "Required fields or GDPR consent missing"},
        403: {"description": "Embedding disabled"},
        404: {"description": "Project not found"},
    },
)
async def submit_enquiry(
    project_id: int,
    data: PublicEnquirySubmit,
    request: Request,
    email_client: EmailClientDep,
    session: AsyncSession = Depends(get_session),
) -> PublicEnquiryResponse:
    """
    Submit an enquiry.

    - **name**, **email**, **subject**, **message**: Required.
    - **phone**, **organization**, **category**: Optional.
    - **gdpr_consent**: Must be true.
    - **mailing_consent**: Adds the submitter to the mailing list.
    """
    project = await _embeddable_project(session, project_id, "Enquiries not enabled")
    if not data.name or not data.email or not data.subject or not data.message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    if not data.gdpr_consent:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="GDPR consent is required")

    category = data.category or "general"
    enquiry = Enquiry(
        project_id=project.id,
        submitter_name=data.name,
        submitter_email=data.email,
        submitter_phone=data.phone or None,
        submitter_org=data.organization or None,
        subject=data.subject,
        message=data.message,
        category=category,
        gdpr_consent=True,
        gdpr_consent_date=utc_now(),
        mailing_consent=data.mailing_consent,
    )
    session.add(enquiry)
    await session.commit()
    await session.refresh(enquiry)

    await StakeholderRepository(session).log_engagements(
        project.id,
        [data.email],
        EngagementType.inbound_email.value,
        f"Enquiry received: {data.subject}",
        description=data.message,
        outcome="Enquiry submitted via public form",
    )
    if data.mailing_consent:
        await SubscriberRepository(session).subscribe(
            project.id,
            data.email,
            name=data.name,
            source=SubscriberSource.enquiry.value,
            source_id=enquiry.id,
        )

    team = (await session.exec(select(TeamMember.email).where(TeamMember.project_id == project.id))).all()
    team_emails = [address for address in team if address]
    if team_emails:
        await send_quietly(
            email_client,
            new_enquiry_email(
                sender=email_client.sender(project.email_from_name, project.email_from_address),
                to=team_emails,
                project_name=project.name,
                submitter_name=data.name,
                submitter_email=data.email,
                subject=data.subject,
                message=data.message,
                category=category,
                enquiry_url=enquiry_link(request, project.id, enquiry.id),
            ),
        )

    logger.info(f"Public enquiry {enquiry.id} submitted to project {project.id}")
    return PublicEnquiryResponse(
        success=True,
        reference=str(enquiry.id),
        message="Your enquiry has been submitted successfully.",
    )
