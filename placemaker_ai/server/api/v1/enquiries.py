"""
API endpoints for the project enquiry inbox.

Enquiries arrive from the public embed, inbound email or manual entry. The
team works them through a status pipeline (new, in_progress, awaiting_info,
draft_ready, sent, closed), keeps an internal message thread, asks team
members for input through tokenised query links, and finally approves and
emails a response to the submitter.
"""

from __future__ import annotations

import secrets
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session, utc_now
from placemaker_ai.core.database.entities import Enquiry, EnquiryMessage, EnquiryQuery, TeamMember
from placemaker_ai.core.database.repositories import StakeholderRepository, SubscriberRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import (
    EngagementType,
    EnquiryStatus,
    MessageType,
    SubscriberSource,
)
from placemaker_ai.core.models.io.enquiries import (
    EnquiryApprove,
    EnquiryApproveResponse,
    EnquiryCreate,
    EnquiryDetailRead,
    EnquiryMessageCreate,
    EnquiryMessageRead,
    EnquiryQueryCreate,
    EnquiryQueryCreated,
    EnquiryQueryRead,
    EnquiryRead,
    EnquirySummaryRead,
    EnquiryUpdate,
)
from placemaker_ai.integrations.email import send_quietly
from placemaker_ai.integrations.email.templates import enquiry_response_email, query_email
from placemaker_ai.server.auth import ProjectDep
from placemaker_ai.server.services.deps import EmailClientDep
from placemaker_ai.server.services.links import query_link

logger = get_logger(__name__)

router = APIRouter(tags=["enquiries"])

RESPONSE_SENT = "Response sent successfully"
RESPONSE_NOT_SENT = "Response saved but email could not be sent (check RESEND_API_KEY)"


async def _get_enquiry(session: AsyncSession, project_id: int, enquiry_id: int) -> Enquiry:
    enquiry = await session.get(Enquiry, enquiry_id)
    if not enquiry or enquiry.project_id != project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Enquiry {enquiry_id} not found")
    return enquiry


async def _child_counts(session: AsyncSession, model, enquiry_ids: List[int]) -> Dict[int, int]:
    if not enquiry_ids:
        return {}
    statement = (
        select(model.enquiry_id, func.count(model.id))
        .where(model.enquiry_id.in_(enquiry_ids))
        .group_by(model.enquiry_id)
    )
    return {enquiry_id: count for enquiry_id, count in (await session.exec(statement)).all()}


@router.get(
    "/{project_id}/enquiries",
    response_model=List[EnquirySummaryRead],
    summary="List Enquiries",
    description="List the project's enquiries, newest first, with message and query counts.",
    response_description="A list of enquiries.",
)
async def list_enquiries(
    ctx: ProjectDep,
    status_filter: Optional[EnquiryStatus] = Query(default=None, alias="status"),
    assigned_to_id: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
) -> List[EnquirySummaryRead]:
    """
    List enquiries.

    - **status**: Only enquiries in this status.
    - **assigned_to_id**: Only enquiries assigned to this team member.
    """
    statement = select(Enquiry).where(Enquiry.project_id == ctx.project_id)
    if status_filter is not None:
        statement = statement.where(Enquiry.status == status_filter.value)
    if assigned_to_id is not None:
        statement = statement.where(Enquiry.assigned_to_id == assigned_to_id)
    statement = statement.order_by(Enquiry.created_at.desc(), Enquiry.id.desc())
    enquiries = (await session.exec(statement)).all()

    ids = [e.id for e in enquiries]
    messages = await _child_counts(session, EnquiryMessage, ids)
    queries = await _child_counts(session, EnquiryQuery, ids)
    return [
        EnquirySummaryRead(
            **EnquiryRead.model_validate(e).model_dump(),
            message_count=messages.get(e.id, 0),
            query_count=queries.get(e.id, 0),
        )
        for e in enquiries
    ]


@router.post(
    "/{project_id}/enquiries",
    response_model=EnquiryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Enquiry",
    description="Record an enquiry received outside the platform. The submitter is added to the mailing list.",
    response_description="The created enquiry.",
)
async def create_enquiry(
    data: EnquiryCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> EnquiryRead:
    """
    Create an enquiry.

    - **submitter_name**, **submitter_email**: Who asked.
    - **subject**, **message**: What they asked.
    - **category**, **priority**: Triage fields.
    """
    enquiry = Enquiry(project_id=ctx.project_id, **data.model_dump())
    if data.gdpr_consent:
        enquiry.gdpr_consent_date = utc_now()
    session.add(enquiry)
    await session.commit()
    await session.refresh(enquiry)

    await SubscriberRepository(session).subscribe(
        ctx.project_id,
        enquiry.submitter_email,
        name=enquiry.submitter_name,
        source=SubscriberSource.enquiry.value,
        source_id=enquiry.id,
    )
    await session.refresh(enquiry)
    logger.info(f"Created enquiry {enquiry.id} for project {ctx.project_id}")
    return EnquiryRead.model_validate(enquiry)


@router.get(
    "/{project_id}/enquiries/{enquiry_id}",
    response_model=EnquiryDetailRead,
    summary="Get Enquiry",
    description="Retrieve an enquiry with its message thread and team queries, oldest first.",
    response_description="The enquiry with messages and queries.",
    responses={404: {"description": "Enquiry not found in this project"}},
)
async def get_enquiry(
    enquiry_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> EnquiryDetailRead:
    enquiry = await _get_enquiry(session, ctx.project_id, enquiry_id)
    messages = await session.exec(
        select(EnquiryMessage)
        .where(EnquiryMessage.enquiry_id == enquiry.id)
        .order_by(EnquiryMessage.created_at, EnquiryMessage.id)
    )
    queries = await session.exec(
        select(EnquiryQuery).where(EnquiryQuery.enquiry_id == enquiry.id).order_by(EnquiryQuery.sent_at, EnquiryQuery.id)
    )
    return EnquiryDetailRead(
        **EnquiryRead.model_validate(enquiry).model_dump(),
        messages=[EnquiryMessageRead.model_validate(m) for m in messages.all()],
        queries=[EnquiryQueryRead.model_validate(q) for q in queries.all()],
    )


@router.patch(
    "/{project_id}/enquiries/{enquiry_id}",
    response_model=EnquiryRead,
    summary="Update Enquiry",
    description=(
        "Update status, assignment, draft or final response. Marking an enquiry as sent logs an "
        "outbound email engagement on the submitter's stakeholder record, when there is one."
    ),
    response_description="The updated enquiry.",
    responses={404: {"description": "Enquiry not found in this project"}},
)
async def update_enquiry(
    enquiry_id: int, data: EnquiryUpdate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> EnquiryRead:
    enquiry = await _get_enquiry(session, ctx.project_id, enquiry_id)
    newly_sent = enquiry.sent_at is None and data.sent_at is not None

    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(enquiry, key, value)
    session.add(enquiry)
    await session.commit()
    await session.refresh(enquiry)

    if newly_sent:
        await StakeholderRepository(session).log_engagements(
            ctx.project_id,
            [enquiry.submitter_email],
            EngagementType.outbound_email.value,
            f"Response sent: {enquiry.subject}",
            description=enquiry.final_response,
            outcome="Response sent to enquiry",
        )
        await session.refresh(enquiry)
    return EnquiryRead.model_validate(enquiry)


@router.delete(
    "/{project_id}/enquiries/{enquiry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Enquiry",
    description="Delete an enquiry with its messages and queries.",
    responses={404: {"description": "Enquiry not found in this project"}},
)
async def delete_enquiry(enquiry_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    enquiry = await _get_enquiry(session, ctx.project_id, enquiry_id)
    await session.delete(enquiry)
    await session.commit()


@router.post(
    "/{project_id}/enquiries/{enquiry_id}/messages",
    response_model=EnquiryMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Enquiry Message",
    description="Add a message to the enquiry thread. A new enquiry moves to in_progress.",
    response_description="The created message.",
    responses={404: {"description": "Enquiry not found in this project"}},
)
async def add_message(
    enquiry_id: int, data: EnquiryMessageCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> EnquiryMessageRead:
    """
    Add a message.

    - **content**: Message text.
    - **type**: internal_note (default), inbound, outbound, query_response or response_sent.
    - **author_name**: Who wrote it.
    """
    enquiry = await _get_enquiry(session, ctx.project_id, enquiry_id)
    message = EnquiryMessage(enquiry_id=enquiry.id, **data.model_dump())
    session.add(message)
    if enquiry.status == EnquiryStatus.new.value:
        enquiry.status = EnquiryStatus.in_progress.value
        session.add(enquiry)
    await session.commit()
    await session.refresh(message)
    return EnquiryMessageRead.model_validate(message)


@router.post(
    "/{project_id}/enquiries/{enquiry_id}/query",
    response_model=EnquiryQueryCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Query Team Member",
    description=(
        "Ask a team member for information. The enquiry moves to awaiting_info and the team member "
        "is emailed a private link to answer."
    ),
    response_description="The created query and whether the email went out.",
    responses={404: {"description": "Enquiry or team member not found in this project"}},
)
async def query_team_member(
    enquiry_id: int,
    data: EnquiryQueryCreate,
    request: Request,
    ctx: ProjectDep,
    email_client: EmailClientDep,
    session: AsyncSession = Depends(get_session),
) -> EnquiryQueryCreated:
    """
    Query a team member.

    - **team_member_id**: Team member to ask.
    - **question**: What to ask.
    """
    enquiry = await _get_enquiry(session, ctx.project_id, enquiry_id)
    member = await session.get(TeamMember, data.team_member_id)
    if not member or member.project_id != ctx.project_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Team member {data.team_member_id} not found",
        )

    query = EnquiryQuery(
        enquiry_id=enquiry.id,
        team_member_id=member.id,
        question=data.question,
        token=secrets.token_urlsafe(32),
    )
    session.add(query)
    enquiry.status = EnquiryStatus.awaiting_info.value
    session.add(enquiry)
    await session.commit()
    await session.refresh(query)

    project = ctx.project
    email_id = await send_quietly(
        email_client,
        query_email(
            sender=email_client.sender(project.email_from_name, project.email_from_address),
            to=member.email,
            team_member_name=member.name,
            question=data.question,
            enquiry_subject=enquiry.subject,
            enquiry_message=enquiry.message,
            submitter_name=enquiry.submitter_name,
            query_url=query_link(request, query.id, query.token),
        ),
    )
    return EnquiryQueryCreated(
        **EnquiryQueryRead.model_validate(query).model_dump(),
        email_sent=email_id is not None,
    )


@router.post(
    "/{project_id}/enquiries/{enquiry_id}/approve",
    response_model=EnquiryApproveResponse,
    summary="Approve and Send Response",
    description="Email the final response to the submitter and mark the enquiry as sent.",
    response_description="The sent enquiry and whether the email went out.",
    responses={
        400: {"description": "Response content missing"},
        404: {"description": "Enquiry not found in this project"},
    },
)
async def approve_response(
    enquiry_id: int,
    data: EnquiryApprove,
    ctx: ProjectDep,
    email_client: EmailClientDep,
    session: AsyncSession = Depends(get_session),
) -> EnquiryApproveResponse:
    """
    Approve a response.

    - **response**: Final response text.
    - **author_name**: Recorded on the thread, defaults to System.
    """
    content = (data.response or "").strip()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Response content is required")
    enquiry = await _get_enquiry(session, ctx.project_id, enquiry_id)

    project = ctx.project
    email_id = await send_quietly(
        email_client,
        enquiry_response_email(
            sender=email_client.sender(project.email_from_name, project.email_from_address),
            to=enquiry.submitter_email,
            submitter_name=enquiry.submitter_name,
            subject=enquiry.subject,
            response=content,
            project_name=project.name or "Consultation",
        ),
    )

    enquiry.status = EnquiryStatus.sent.value
    enquiry.final_response = content
    enquiry.sent_at = utc_now()
    session.add(enquiry)
    session.add(
        EnquiryMessage(
            enquiry_id=enquiry.id,
            type=MessageType.response_sent.value,
            content=content,
            author_name=data.author_name or "System",
        )
    )
    await session.commit()
    await session.refresh(enquiry)

    email_sent = email_id is not None
    logger.info(f"Approved response for enquiry {enquiry.id} (email_sent={email_sent})")
    return EnquiryApproveResponse(
        enquiry=EnquiryRead.model_validate(enquiry),
        email_sent=email_sent,
        message=RESPONSE_SENT if email_sent else RESPONSE_NOT_SENT,
    )
