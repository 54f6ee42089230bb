"""
Public endpoints behind the links emailed to team members.

A team member asked for input on an enquiry opens ``/queries/{id}?token=...``
without signing in; the token in the link is the credential.
"""

from __future__ import annotations

import secrets

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session, utc_now
from placemaker_ai.core.database.entities import Enquiry, EnquiryMessage, EnquiryQuery, Project, TeamMember
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import EnquiryStatus, MessageType, QueryStatus
from placemaker_ai.core.models.io.enquiries import EnquiryQueryRead, PublicQueryAnswer, PublicQueryRead

logger = get_logger(__name__)

router = APIRouter(tags=["queries"])


async def _get_query(session: AsyncSession, query_id: int, token: str) -> EnquiryQuery:
    query = await session.get(EnquiryQuery, query_id)
    if not query:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Query not found")
    if not token or not secrets.compare_digest(query.token, token):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid query or token")
    return query


@router.get(
    "/{query_id}",
    response_model=PublicQueryRead,
    summary="Get Query",
    description="Show a team member the question they were asked and the enquiry it concerns.",
    response_description="The query with enquiry context.",
    responses={
        403: {"description": "Token missing or wrong"},
        404: {"description": "Query not found"},
    },
)
async def get_query(
    query_id: int,
    token: str = Query(default=""),
    session: AsyncSession = Depends(get_session),
) -> PublicQueryRead:
    query = await _get_query(session, query_id, token)
    member = await session.get(TeamMember, query.team_member_id)
    enquiry = await session.get(Enquiry, query.enquiry_id)
    project = await session.get(Project, enquiry.project_id)
    return PublicQueryRead(
        id=query.id,
        question=query.question,
        status=query.status,
        response=query.response,
        team_member_name=member.name,
        enquiry_subject=enquiry.subject,
        enquiry_message=enquiry.message,
        project_name=project.name,
    )


@router.post(
    "/{query_id}",
    response_model=EnquiryQueryRead,
    summary="Answer Query",
    description=(
        "Record the team member's answer on the enquiry thread. Once no query on the enquiry is "
        "pending, the enquiry returns to in_progress."
    ),
    response_description="The answered query.",
    responses={
        403: {"description": "Token missing or wrong"},
        404: {"description": "Query not found"},
    },
)
async def answer_query(
    query_id: int,
    data: PublicQueryAnswer,
    token: str = Query(default=""),
    session: AsyncSession = Depends(get_session),
) -> EnquiryQueryRead:
    """
    Answer a query.

    - **response**: The team member's answer.
    """
    query = await _get_query(session, query_id, token)
    member = await session.get(TeamMember, query.team_member_id)

    query.response = data.response
    query.status = QueryStatus.responded.value
    query.responded_at = utc_now()
    session.add(query)
    session.add(
        EnquiryMessage(
            enquiry_id=query.enquiry_id,
            type=MessageType.query_response.value,
            content=f"Response from {member.name}: {data.response}",
            author_name=member.name,
        )
    )
    await session.flush()

    pending = (
        await session.exec(
            select(func.count(EnquiryQuery.id)).where(
                EnquiryQuery.enquiry_id == query.enquiry_id,
                EnquiryQuery.status == QueryStatus.pending.value,
            )
        )
    ).one()
    if pending == 0:
        enquiry = await session.get(Enquiry, query.enquiry_id)
        enquiry.status = EnquiryStatus.in_progress.value
        session.add(enquiry)
    await session.commit()
    await session.refresh(query)
    logger.info(f"Query {query.id} answered by team member {member.id}")
    return EnquiryQueryRead.model_validate(query)
