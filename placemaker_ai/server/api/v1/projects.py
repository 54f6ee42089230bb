"""
API endpoints for consultation projects.

Projects are the top-level container: every stakeholder, form, enquiry, map
layer and tour belongs to one. Super admins see and manage every project;
other users see the projects they were granted access to.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import Project
from placemaker_ai.core.database.repositories import ProjectRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import Permission
from placemaker_ai.core.models.io.projects import (
    ProjectCounts,
    ProjectCreate,
    ProjectDetailRead,
    ProjectRead,
    ProjectSummaryRead,
    ProjectUpdate,
)
from placemaker_ai.server.auth import (
    CurrentUser,
    ProjectContext,
    ProjectDep,
    is_super_admin,
    require_project_permission,
    require_super_admin,
)

logger = get_logger(__name__)

router = APIRouter(tags=["projects"])

_SENDER_FIELDS = ("email_from_name", "email_from_address")


@router.get(
    "",
    response_model=List[ProjectSummaryRead],
    summary="List Projects",
    description="List the projects visible to the caller, newest first, with stakeholder, form and marker counts.",
    response_description="A list of projects with record counts.",
    responses={
        200: {"description": "Projects retrieved successfully"},
        401: {"description": "Caller not signed in"},
    },
)
async def list_projects(user: CurrentUser, session: AsyncSession = Depends(get_session)) -> List[ProjectSummaryRead]:
    """
    List projects.

    Super admins see every project. Other users see only projects they hold
    an access grant for.
    """
    repo = ProjectRepository(session)
    projects = await repo.list_visible(user, super_admin=is_super_admin(user))
    counts = await repo.counts([p.id for p in projects])
    return [
        ProjectSummaryRead(
            **ProjectRead.model_validate(p).model_dump(),
            counts=ProjectCounts(**counts.get(p.id, {})),
        )
        for p in projects
    ]


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a new consultation project. Restricted to super admins.",
    response_description="The created project.",
    responses={
        201: {"description": "Project created successfully"},
        403: {"description": "Caller is not a super admin"},
    },
    dependencies=[Depends(require_super_admin)],
)
async def create_project(data: ProjectCreate, session: AsyncSession = Depends(get_session)) -> ProjectRead:
    """
    Create a project.

    - **name**: Project name.
    - **description**: Optional public description.
    - **latitude** / **longitude**: Optional site location.
    - **email_from_name** / **email_from_address**: Optional sender identity for project email.
    """
    project = Project.model_validate(data)
    for field in _SENDER_FIELDS:
        setattr(project, field, getattr(project, field) or None)
    project = await ProjectRepository(session).create(project)
    logger.info(f"Created project {project.id} '{project.name}'")
    return ProjectRead.model_validate(project)


@router.get(
    "/{project_id}",
    response_model=ProjectDetailRead,
    summary="Get Project",
    description="Retrieve a project together with the caller's role on it.",
    response_description="The project with user_role and is_admin.",
    responses={
        200: {"description": "Project found"},
        403: {"description": "Caller has no access to the project"},
        404: {"description": "Project not found"},
    },
)
async def get_project(ctx: ProjectDep) -> ProjectDetailRead:
    """
    Get project by ID.

    - **project_id**: The unique identifier of the project.
    """
    return ProjectDetailRead(
        **ProjectRead.model_validate(ctx.project).model_dump(),
        user_role=ctx.role,
        is_admin=ctx.access.is_admin,
    )


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update Project",
    description="Partially update a project. Only supplied fields are written. Requires the project ADMIN role.",
    response_description="The updated project.",
    responses={
        200: {"description": "Project updated successfully"},
        403: {"description": "Caller is not a project admin"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    data: ProjectUpdate,
    ctx: ProjectContext = Depends(require_project_permission(Permission.settings_manage)),
    session: AsyncSession = Depends(get_session),
) -> ProjectRead:
    """
    Update project.

    Empty sender name or address values are stored as null so the platform
    default sender is used again.

    - **project_id**: The unique identifier of the project to update.
    - **data**: The fields to update (all fields are optional).
    """
    project = ctx.project
    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if key in _SENDER_FIELDS:
            value = value or None
        setattr(project, key, value)

    session.add(project)
    await session.commit()
    await session.refresh(project)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Project",
    description="Permanently delete a project and everything that belongs to it. Restricted to super admins.",
    responses={
        204: {"description": "Project deleted successfully"},
        403: {"description": "Caller is not a super admin"},
        404: {"description": "Project not found"},
    },
    dependencies=[Depends(require_super_admin)],
)
async def delete_project(project_id: int, session: AsyncSession = Depends(get_session)) -> None:
    """
    Delete project.

    - **project_id**: The unique identifier of the project to delete.
    """
    if not await ProjectRepository(session).delete(project_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project {project_id} not found",
        )
    logger.info(f"Deleted project {project_id}")
