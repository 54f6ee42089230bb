"""
Authorisation dependencies.

The identity proxy in front of the service authenticates the caller and
forwards their user id in the ``X-User-Id`` header. These dependencies turn
that header into a ``User`` and guard project-scoped routes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import Project, User
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import Permission, ProjectRole
from placemaker_ai.server.core import constant

from .permissions import ProjectAccessResult, can_access_project, is_super_admin

logger = get_logger(__name__)


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None, alias=constant.USER_ID_HEADER),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the signed-in user; 401 when the header is missing, malformed or unknown."""
    if not x_user_id or not x_user_id.strip().isdigit():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    user = await session.get(User, int(x_user_id))
    if user is None:
        logger.warning(f"Request carried unknown user id {x_user_id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_super_admin(user: CurrentUser) -> User:
    if not is_super_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user


@dataclass
class ProjectContext:
    """The project addressed by a route, with the caller's access to it."""

    project: Project
    user: User
    access: ProjectAccessResult

    @property
    def project_id(self) -> int:
        return self.project.id  # type: ignore[return-value]

    @property
    def role(self) -> Optional[ProjectRole]:
        return self.access.role


async def get_project_context(
    project_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> ProjectContext:
    """Load the project named in the path; 404 when missing, 403 without access."""
    project = await session.get(Project, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    access = await can_access_project(session, user, project_id)
    if not access.can_access:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return ProjectContext(project=project, user=user, access=access)


ProjectDep = Annotated[ProjectContext, Depends(get_project_context)]


def require_project_permission(permission: Permission):
    """Build a dependency that demands ``permission`` on the addressed project."""

    async def _check(ctx: ProjectDep) -> ProjectContext:
        if not ctx.access.allows(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission {permission.value}",
            )
        return ctx

    return _check
