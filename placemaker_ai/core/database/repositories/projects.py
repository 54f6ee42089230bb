"""
Project and user repositories.

Covers the project listing with dashboard counts and the per-project access
grants that drive authorisation.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.feedback import FeedbackForm
from ..entities.map_data import MapMarker
from ..entities.projects import Project, ProjectAccess, User
from ..entities.stakeholders import Stakeholder
from .base import AsyncBaseRepository


class ProjectRepository(AsyncBaseRepository[Project]):
    """Repository for projects."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def list_visible(self, user: User, super_admin: bool) -> List[Project]:
        """Projects the user may see, newest first."""
        stmt = select(Project).order_by(Project.created_at.desc(), Project.id.desc())  # type: ignore
        if not super_admin:
            stmt = stmt.join(ProjectAccess, ProjectAccess.project_id == Project.id).where(
                ProjectAccess.user_id == user.id
            )
        return list((await self.session.exec(stmt)).all())

    async def _count_by_project(self, model, project_ids: List[int]) -> Dict[int, int]:
        stmt = (
            select(model.project_id, func.count(model.id))
            .where(model.project_id.in_(project_ids))
            .group_by(model.project_id)
        )
        return {project_id: count for project_id, count in (await self.session.exec(stmt)).all()}

    async def counts(self, project_ids: List[int]) -> Dict[int, Dict[str, int]]:
        """Stakeholder, form and marker counts keyed by project id."""
        if not project_ids:
            return {}
        stakeholders = await self._count_by_project(Stakeholder, project_ids)
        forms = await self._count_by_project(FeedbackForm, project_ids)
        markers = await self._count_by_project(MapMarker, project_ids)
        return {
            pid: {
                "stakeholders": stakeholders.get(pid, 0),
                "forms": forms.get(pid, 0),
                "markers": markers.get(pid, 0),
            }
            for pid in project_ids
        }


class UserRepository(AsyncBaseRepository[User]):
    """Repository for users and their project access grants."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return (await self.session.exec(stmt)).first()

    async def list_all(self) -> List[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())  # type: ignore
        return list((await self.session.exec(stmt)).all())

    async def get_access(self, user_id: int, project_id: int) -> Optional[ProjectAccess]:
        stmt = select(ProjectAccess).where(ProjectAccess.user_id == user_id, ProjectAccess.project_id == project_id)
        return (await self.session.exec(stmt)).first()

    async def access_for(self, user_id: int) -> List[tuple[ProjectAccess, Project]]:
        stmt = (
            select(ProjectAccess, Project)
            .join(Project, Project.id == ProjectAccess.project_id)
            .where(ProjectAccess.user_id == user_id)
            .order_by(Project.name)
        )
        return [(access, project) for access, project in (await self.session.exec(stmt)).all()]

    async def replace_access(self, user_id: int, grants: Iterable[tuple[int, str]]) -> None:
        """Swap every project grant of a user for ``grants`` of (project_id, role) pairs."""
        await self.session.exec(delete(ProjectAccess).where(ProjectAccess.user_id == user_id))
        for project_id, role in grants:
            self.session.add(ProjectAccess(user_id=user_id, project_id=project_id, role=role))
        await self.session.flush()
