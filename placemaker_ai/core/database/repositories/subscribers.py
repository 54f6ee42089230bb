"""
Subscriber repository.

Implements the mailing list upsert shared by pins, forms, enquiries and
manual additions.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.mailing import Subscriber
from .base import AsyncBaseRepository


class SubscriberRepository(AsyncBaseRepository[Subscriber]):
    """Repository for mailing list subscribers."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Subscriber)

    async def get_by_email(self, project_id: int, email: str) -> Optional[Subscriber]:
        stmt = select(Subscriber).where(Subscriber.project_id == project_id, Subscriber.email == email.lower())
        return (await self.session.exec(stmt)).first()

    async def list_for_project(self, project_id: int, active_only: bool = False) -> List[Subscriber]:
        stmt = select(Subscriber).where(Subscriber.project_id == project_id)
        if active_only:
            stmt = stmt.where(Subscriber.subscribed == True)  # noqa: E712
        stmt = stmt.order_by(Subscriber.created_at.desc())  # type: ignore
        return list((await self.session.exec(stmt)).all())

    async def subscribe(
        self,
        project_id: int,
        email: str,
        name: Optional[str] = None,
        source: str = "manual",
        source_id: Optional[int] = None,
        commit: bool = True,
    ) -> Subscriber:
        """Add an address to a project's mailing list, or re-activate it.

        New entries record their source and GDPR consent time. Existing
        entries are re-subscribed, take the new name when one is given and
        have their consent time refreshed.

        Args:
            project_id: Project whose list is updated
            email: Address; stored lower-cased
            name: Optional display name
            source: Where the address came from
            source_id: Id of the record that produced the address
            commit: Commit the session after the upsert

        Returns:
            The created or updated subscriber
        """
        now = utc_now()
        subscriber = await self.get_by_email(project_id, email)
        if subscriber is None:
            subscriber = Subscriber(
                project_id=project_id,
                email=email.lower(),
                name=name,
                source=source,
                source_id=source_id,
                gdpr_consent=True,
                gdpr_consent_date=now,
            )
        else:
            if name:
                subscriber.name = name
            subscriber.subscribed = True
            subscriber.unsubscribed_at = None
            subscriber.gdpr_consent = True
            subscriber.gdpr_consent_date = now
        self.session.add(subscriber)
        if commit:
            await self.session.commit()
            await self.session.refresh(subscriber)
        else:
            await self.session.flush()
        return subscriber

    async def unsubscribe(self, project_id: int, email: str) -> Optional[Subscriber]:
        subscriber = await self.get_by_email(project_id, email)
        if subscriber is None:
            return None
        subscriber.subscribed = False
        subscriber.unsubscribed_at = utc_now()
        return await self.update(subscriber)
