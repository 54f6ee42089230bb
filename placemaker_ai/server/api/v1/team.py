"""
API endpoints for project team members.

Team members are the people enquiries are assigned to and who answer
information requests. They do not need a platform account.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import TeamMember
from placemaker_ai.core.models.io.projects import TeamMemberCreate, TeamMemberRead, TeamMemberUpdate
from placemaker_ai.server.auth import ProjectDep

router = APIRouter(tags=["team"])


async def _get_member(session: AsyncSession, project_id: int, member_id: int) -> TeamMember:
    member = await session.get(TeamMember, member_id)
    if not member or member.project_id != project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Team member {member_id} not found")
    return member


@router.get(
    "/{project_id}/team",
    response_model=List[TeamMemberRead],
    summary="List Team Members",
    description="List the project's team members, oldest first.",
    response_description="A list of team members.",
)
async def list_team_members(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[TeamMemberRead]:
    statement = (
        select(TeamMember)
        .where(TeamMember.project_id == ctx.project_id)
        .order_by(TeamMember.created_at, TeamMember.id)
    )
    result = await session.exec(statement)
    return [TeamMemberRead.model_validate(m) for m in result.all()]


@router.post(
    "/{project_id}/team",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Team Member",
    description="Add a person to the project team.",
    response_description="The created team member.",
)
async def create_team_member(
    data: TeamMemberCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> TeamMemberRead:
    """
    Add a team member.

    - **name**: Display name.
    - **email**: Address used for information requests and enquiry notifications.
    - **role**: Optional job title.
    """
    member = TeamMember(project_id=ctx.project_id, **data.model_dump())
    session.add(member)
    await session.commit()
    await session.refresh(member)
    return TeamMemberRead.model_validate(member)


@router.patch(
    "/{project_id}/team/{member_id}",
    response_model=TeamMemberRead,
    summary="Update Team Member",
    description="Partially update a team member.",
    response_description="The updated team member.",
    responses={404: {"description": "Team member not found"}},
)
async def update_team_member(
    member_id: int, data: TeamMemberUpdate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> TeamMemberRead:
    member = await _get_member(session, ctx.project_id, member_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(member, key, value)
    session.add(member)
    await session.commit()
    await session.refresh(member)
    return TeamMemberRead.model_validate(member)


@router.delete(
    "/{project_id}/team/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Team Member",
    description="Remove a person from the project team.",
    responses={404: {"description": "Team member not found"}},
)
async def delete_team_member(member_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    member = await _get_member(session, ctx.project_id, member_id)
    await session.delete(member)
    await session.commit()
