"""
API endpoints for the project mailing list and outbound email.

Subscribers come from pins, forms and enquiries given with mailing consent,
or are added by hand. The team can broadcast to everyone subscribed or send
a one-off email; both are recorded in the project's email history and
logged as engagements on matching stakeholders.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session, utc_now
from placemaker_ai.core.database.entities import ProjectEmail, Subscriber
from placemaker_ai.core.database.repositories import StakeholderRepository, SubscriberRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import EngagementType, SubscriberSource
from placemaker_ai.core.models.io.mailing import (
    BroadcastRequest,
    BroadcastResponse,
    DirectSendRequest,
    DirectSendResponse,
    ProjectEmailRead,
    SubscriberCreate,
    SubscriberRead,
)
from placemaker_ai.integrations.email import EmailDeliveryError, send_quietly
from placemaker_ai.integrations.email.templates import mailing_list_email
from placemaker_ai.server.auth import ProjectDep
from placemaker_ai.server.services.deps import EmailClientDep

logger = get_logger(__name__)

router = APIRouter(tags=["mailing-list"])


@router.get(
    "/{project_id}/subscribers",
    response_model=List[SubscriberRead],
    summary="List Subscribers",
    description="List every mailing list entry, subscribed or not, newest first.",
    response_description="A list of subscribers.",
)
async def list_subscribers(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[SubscriberRead]:
    subscribers = await SubscriberRepository(session).list_for_project(ctx.project_id)
    return [SubscriberRead.model_validate(s) for s in subscribers]


@router.post(
    "/{project_id}/subscribers",
    response_model=SubscriberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Subscriber",
    description=(
        "Add an address to the mailing list. An unsubscribed address is re-subscribed; an active "
        "one is returned unchanged."
    ),
    response_description="The subscriber.",
)
async def add_subscriber(
    data: SubscriberCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> SubscriberRead:
    """
    Add a subscriber.

    - **email**: Address, stored lower-cased.
    - **name**: Optional display name.
    """
    repo = SubscriberRepository(session)
    existing = await repo.get_by_email(ctx.project_id, data.email)
    if existing is not None and existing.subscribed:
        return SubscriberRead.model_validate(existing)
    subscriber = await repo.subscribe(
        ctx.project_id, data.email, name=data.name, source=SubscriberSource.manual.value
    )
    return SubscriberRead.model_validate(subscriber)


@router.delete(
    "/{project_id}/subscribers",
    response_model=SubscriberRead,
    summary="Unsubscribe",
    description="Unsubscribe an address. The entry is kept with its unsubscribe time.",
    response_description="The unsubscribed entry.",
    responses={404: {"description": "Address not on this project's list"}},
)
async def unsubscribe(
    ctx: ProjectDep,
    email: str = Query(min_length=3),
    session: AsyncSession = Depends(get_session),
) -> SubscriberRead:
    subscriber = await SubscriberRepository(session).unsubscribe(ctx.project_id, email)
    if subscriber is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subscriber {email} not found")
    return SubscriberRead.model_validate(subscriber)


@router.delete(
    "/{project_id}/subscribers/{subscriber_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Subscriber",
    description="Remove a mailing list entry entirely.",
    responses={404: {"description": "Subscriber not found in this project"}},
)
async def delete_subscriber(
    subscriber_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> None:
    subscriber = await session.get(Subscriber, subscriber_id)
    if not subscriber or subscriber.project_id != ctx.project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subscriber {subscriber_id} not found")
    await session.delete(subscriber)
    await session.commit()


@router.get(
    "/{project_id}/emails",
    response_model=List[ProjectEmailRead],
    summary="List Sent Emails",
    description="List broadcasts and direct emails sent for the project, newest first.",
    response_description="Email history.",
)
async def list_emails(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[ProjectEmailRead]:
    statement = (
        select(ProjectEmail)
        .where(ProjectEmail.project_id == ctx.project_id)
        .order_by(ProjectEmail.sent_at.desc(), ProjectEmail.id.desc())
    )
    return [ProjectEmailRead.model_validate(e) for e in (await session.exec(statement)).all()]


@router.post(
    "/{project_id}/emails",
    response_model=BroadcastResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Broadcast Email",
    description=(
        "Email every active subscriber, record the email in the project history and log an "
        "outbound email engagement on each subscribed stakeholder."
    ),
    response_description="The recorded email with delivery counts.",
    responses={400: {"description": "Nobody is subscribed"}},
)
async def broadcast_email(
    data: BroadcastRequest,
    ctx: ProjectDep,
    email_client: EmailClientDep,
    session: AsyncSession = Depends(get_session),
) -> BroadcastResponse:
    """
    Broadcast to the mailing list.

    - **subject**: Email subject.
    - **body**: Plain text body.
    - **sent_by**: Who sent it, for the history.
    """
    subscribers = await SubscriberRepository(session).list_for_project(ctx.project_id, active_only=True)
    if not subscribers:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No subscribers to send to")
    addresses = [s.email for s in subscribers]
    project = ctx.project

    email_id = await send_quietly(
        email_client,
        mailing_list_email(
            sender=email_client.sender(project.email_from_name, project.email_from_address),
            to=addresses,
            subject=data.subject,
            body=data.body,
            project_name=project.name,
        ),
    )

    record = ProjectEmail(
        project_id=ctx.project_id,
        subject=data.subject,
        body=data.body,
        sent_by=data.sent_by,
        recipient_count=len(addresses),
        sent_at=utc_now(),
    )
    session.add(record)
    await session.commit()
    await session.refresh(record)

    logged = await StakeholderRepository(session).log_engagements(
        ctx.project_id,
        addresses,
        EngagementType.outbound_email.value,
        f"Email sent: {data.subject}",
        description=data.body,
        outcome=f"Sent as part of mailing list broadcast to {len(addresses)} recipients",
    )
    await session.refresh(record)
    logger.info(f"Broadcast '{data.subject}' to {len(addresses)} subscriber(s) of project {ctx.project_id}")
    return BroadcastResponse(
        project_email=ProjectEmailRead.model_validate(record),
        recipients=len(addresses),
        stakeholder_engagements_logged=logged,
        email_sent=email_id is not None,
    )


@router.post(
    "/{project_id}/emails/send",
    response_model=DirectSendResponse,
    summary="Send Direct Email",
    description="Send a one-off email to chosen addresses and record it in the project history.",
    response_description="Provider id and delivery counts.",
    responses={
        400: {"description": "to, subject or message missing"},
        500: {"description": "Email not configured or provider failure"},
    },
)
async def send_direct_email(
    data: DirectSendRequest,
    ctx: ProjectDep,
    email_client: EmailClientDep,
    session: AsyncSession = Depends(get_session),
) -> DirectSendResponse:
    """
    Send a direct email.

    - **to**: Recipient addresses.
    - **subject**: Email subject.
    - **message**: Plain text body.
    - **sent_by**: Who sent it, defaults to System.
    """
    to = [address.strip() for address in (data.to or []) if address and address.strip()]
    if not to or not data.subject or not data.message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="to, subject, and message are required")
    if not email_client.configured:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Email sending not configured (RESEND_API_KEY missing)",
        )

    project = ctx.project
    try:
        email_id = await email_client.send(
            mailing_list_email(
                sender=email_client.sender(project.email_from_name, project.email_from_address),
                to=to,
                subject=data.subject,
                body=data.message,
                project_name=project.name,
            )
        )
    except EmailDeliveryError as e:
        logger.error(f"Direct email to {len(to)} recipient(s) failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    record = ProjectEmail(
        project_id=ctx.project_id,
        subject=data.subject,
        body=data.message,
        sent_by=data.sent_by or "System",
        recipient_count=len(to),
        sent_at=utc_now(),
    )
    session.add(record)
    await session.commit()
    await session.refresh(record)

    logged = await StakeholderRepository(session).log_engagements(
        ctx.project_id,
        to,
        EngagementType.outbound_email.value,
        f"Email sent: {data.subject}",
        description=data.message,
        outcome="Direct email sent",
    )
    return DirectSendResponse(
        success=True,
        email_id=email_id,
        project_email_id=record.id,
        recipient_count=len(to),
        stakeholder_engagements_logged=logged,
    )
