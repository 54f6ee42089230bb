"""
API endpoints for user administration.

Super admins manage platform users here: their system role and the project
roles they hold through access grants.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import Project, User
from placemaker_ai.core.database.repositories import UserRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.io.projects import (
    ProjectAccessGrant,
    ProjectAccessRead,
    UserCreate,
    UserRead,
    UserUpdate,
)
from placemaker_ai.server.auth import require_super_admin

logger = get_logger(__name__)

router = APIRouter(tags=["admin-users"], dependencies=[Depends(require_super_admin)])


async def _user_read(repo: UserRepository, user: User) -> UserRead:
    grants = [
        ProjectAccessRead(project_id=access.project_id, role=access.role, project_name=project.name)
        for access, project in await repo.access_for(user.id)
    ]
    return UserRead(
        id=user.id,
        email=user.email,
        name=user.name,
        system_role=user.system_role,
        created_at=user.created_at,
        project_access=grants,
    )


async def _check_projects(session: AsyncSession, grants: List[ProjectAccessGrant]) -> None:
    ids = {g.project_id for g in grants}
    if not ids:
        return
    found = set((await session.exec(select(Project.id).where(Project.id.in_(ids)))).all())
    missing = sorted(ids - found)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown project id(s): {', '.join(str(m) for m in missing)}",
        )


@router.get(
    "",
    response_model=List[UserRead],
    summary="List Users",
    description="List every platform user with their project access grants.",
    response_description="A list of users.",
    responses={
        200: {"description": "Users retrieved successfully"},
        403: {"description": "Caller is not a super admin"},
    },
)
async def list_users(session: AsyncSession = Depends(get_session)) -> List[UserRead]:
    """
    List users, newest first.
    """
    repo = UserRepository(session)
    return [await _user_read(repo, user) for user in await repo.list_all()]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a platform user and grant project access.",
    response_description="The created user.",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "Email missing or already in use"},
    },
)
async def create_user(data: UserCreate, session: AsyncSession = Depends(get_session)) -> UserRead:
    """
    Create a user.

    - **email**: Login email, required and unique.
    - **name**: Optional display name.
    - **system_role**: SUPER_ADMIN or USER (default).
    - **project_access**: Project roles to grant.
    """
    email = (data.email or "").strip().lower()
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")
    repo = UserRepository(session)
    if await repo.get_by_email(email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists")
    await _check_projects(session, data.project_access)

    user = User(email=email, name=data.name, system_role=data.system_role)
    session.add(user)
    await session.flush()
    await repo.replace_access(user.id, [(g.project_id, g.role) for g in data.project_access])
    await session.commit()
    await session.refresh(user)
    logger.info(f"Created user {user.id} ({user.system_role})")
    return await _user_read(repo, user)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    description="Retrieve a user with their project access grants.",
    response_description="The user.",
    responses={
        200: {"description": "User found"},
        404: {"description": "User not found"},
    },
)
async def get_user(user_id: int, session: AsyncSession = Depends(get_session)) -> UserRead:
    """
    Get user by ID.

    - **user_id**: The unique identifier of the user.
    """
    repo = UserRepository(session)
    user = await repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return await _user_read(repo, user)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    summary="Update User",
    description="Update a user's name or system role; a supplied project_access list replaces every grant.",
    response_description="The updated user.",
    responses={
        200: {"description": "User updated successfully"},
        400: {"description": "Unknown project in project_access"},
        404: {"description": "User not found"},
    },
)
async def update_user(user_id: int, data: UserUpdate, session: AsyncSession = Depends(get_session)) -> UserRead:
    """
    Update user.

    - **user_id**: The unique identifier of the user to update.
    - **name**: New display name.
    - **system_role**: New system role.
    - **project_access**: Full replacement of the user's project grants.
    """
    repo = UserRepository(session)
    user = await repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")

    update_data = data.model_dump(exclude_unset=True, exclude={"project_access"})
    for key, value in update_data.items():
        if value is not None:
            setattr(user, key, value)
    session.add(user)

    if data.project_access is not None:
        await _check_projects(session, data.project_access)
        await repo.replace_access(user.id, [(g.project_id, g.role) for g in data.project_access])

    await session.commit()
    await session.refresh(user)
    return await _user_read(repo, user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    description="Delete a user and their access grants. Super admins cannot delete themselves.",
    responses={
        204: {"description": "User deleted successfully"},
        400: {"description": "Attempt to delete the calling user"},
        404: {"description": "User not found"},
    },
)
async def delete_user(
    user_id: int,
    caller: User = Depends(require_super_admin),
    session: AsyncSession = Depends(get_session),
) -> None:
    """
    Delete user.

    - **user_id**: The unique identifier of the user to delete.
    """
    if user_id == caller.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")
    if not await UserRepository(session).delete(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    logger.info(f"Deleted user {user_id}")
