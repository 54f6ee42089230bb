"""
Stakeholder repository.

Besides plain lookups this holds the engagement auto-logging used whenever
the platform exchanges email with an address that belongs to a stakeholder.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import as_utc

from ..base import utc_now
from ..entities.stakeholders import Stakeholder, StakeholderEngagement
from .base import AsyncBaseRepository

logger = get_logger(__name__)

DESCRIPTION_LIMIT = 500


def truncate(text: Optional[str], limit: int = DESCRIPTION_LIMIT) -> Optional[str]:
    """Cut ``text`` to ``limit`` characters, marking the cut with ``...``."""
    if text is None or len(text) <= limit:
        return text
    return text[:limit] + "..."


class StakeholderRepository(AsyncBaseRepository[Stakeholder]):
    """Repository for stakeholders and their engagements."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Stakeholder)

    async def get_for_project(self, project_id: int, stakeholder_id: int) -> Optional[Stakeholder]:
        stakeholder = await self.get_by_id(stakeholder_id)
        if stakeholder is None or stakeholder.project_id != project_id:
            return None
        return stakeholder

    async def find_by_emails(self, project_id: int, emails: Iterable[str]) -> List[Stakeholder]:
        """Stakeholders of a project whose email matches any of ``emails``, ignoring case."""
        lowered = {e.lower() for e in emails if e}
        if not lowered:
            return []
        stmt = select(Stakeholder).where(
            Stakeholder.project_id == project_id,
            func.lower(Stakeholder.email).in_(lowered),
        )
        return list((await self.session.exec(stmt)).all())

    async def exists(self, project_id: int, name: str, organization: Optional[str]) -> bool:
        stmt = select(Stakeholder.id).where(
            Stakeholder.project_id == project_id,
            Stakeholder.name == name,
            Stakeholder.organization == organization,
        )
        return (await self.session.exec(stmt)).first() is not None

    async def engagements(self, stakeholder_id: int) -> List[StakeholderEngagement]:
        stmt = (
            select(StakeholderEngagement)
            .where(StakeholderEngagement.stakeholder_id == stakeholder_id)
            .order_by(StakeholderEngagement.date.desc())  # type: ignore
        )
        return list((await self.session.exec(stmt)).all())

    async def log_engagements(
        self,
        project_id: int,
        emails: Iterable[str],
        type: str,
        title: str,
        description: Optional[str] = None,
        outcome: Optional[str] = None,
        date: Optional[datetime] = None,
        commit: bool = True,
    ) -> int:
        """Record an engagement for every stakeholder whose email is among ``emails``.

        Returns:
            Number of engagements logged
        """
        stakeholders = await self.find_by_emails(project_id, emails)
        when = as_utc(date) or utc_now()
        for stakeholder in stakeholders:
            self.session.add(
                StakeholderEngagement(
                    stakeholder_id=stakeholder.id,
                    type=type,
                    title=title,
                    description=truncate(description),
                    outcome=outcome,
                    date=when,
                )
            )
        if stakeholders:
            if commit:
                await self.session.commit()
            else:
                await self.session.flush()
            logger.debug(f"Logged {len(stakeholders)} {type} engagement(s) for project {project_id}")
        return len(stakeholders)
