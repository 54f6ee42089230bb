"""
Council and councillor repository.

Holds the councillor matching used by stakeholder auto-detection, the
councillor import upsert and the statistics shown on the councils page.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.logging_config import get_logger

from ..base import utc_now
from ..entities.councils import Council, Councillor
from .base import AsyncBaseRepository, QueryBuilder

logger = get_logger(__name__)

UNKNOWN_WARD = "Unknown Ward"
_WARD_SUFFIX = re.compile(r"\s*ward$", re.IGNORECASE)


def strip_ward_suffix(ward: str) -> str:
    """Drop a trailing ``Ward`` (any case, with any leading whitespace)."""
    return _WARD_SUFFIX.sub("", ward)


class CouncilRepository(AsyncBaseRepository[Council]):
    """Repository for councils and their councillors."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Council)

    async def get_by_name(self, name: str) -> Optional[Council]:
        """Find a council by its name or its MapIt name."""
        stmt = select(Council).where(or_(Council.name == name, Council.mapit_name == name))
        result = await self.session.exec(stmt)
        return result.first()

    async def list_with_counts(self) -> List[Tuple[Council, int]]:
        """All councils ordered by name, each with its number of councillors."""
        stmt = (
            select(Council, func.count(Councillor.id))
            .join(Councillor, Councillor.council_id == Council.id, isouter=True)
            .group_by(Council.id)
            .order_by(Council.name)
        )
        result = await self.session.exec(stmt)
        return [(council, count) for council, count in result.all()]

    async def stats(self) -> dict:
        total_councils = (await self.session.exec(select(func.count(Council.id)))).one()
        total_councillors = (await self.session.exec(select(func.count(Councillor.id)))).one()
        imported = (
            await self.session.exec(select(func.count(Council.id)).where(Council.import_status == "success"))
        ).one()
        failed = (
            await self.session.exec(select(func.count(Council.id)).where(Council.import_status == "failed"))
        ).one()
        last_updated = (await self.session.exec(select(func.max(Council.last_updated)))).one()
        return {
            "total_councils": total_councils,
            "total_councillors": total_councillors,
            "imported_councils": imported,
            "failed_councils": failed,
            "last_updated": last_updated,
        }

    async def find_councillors(self, council_name: str, ward_name: str) -> List[Councillor]:
        """Find the councillors representing a ward.

        Exact matching is tried first: the council by name or MapIt name and
        the ward by name or MapIt ward name, as given, without a trailing
        "Ward" and with " Ward" appended. When nothing matches, every
        councillor of a council whose name contains the first word of
        ``council_name`` is considered, keeping those whose lower-cased ward
        (without "ward") contains the target ward or is contained in it.

        Args:
            council_name: Council name as reported by MapIt
            ward_name: Ward name as reported by MapIt

        Returns:
            Matching councillors, possibly empty
        """
        bare = strip_ward_suffix(ward_name)
        candidates = {ward_name, bare, f"{ward_name} Ward"}
        stmt = (
            select(Councillor)
            .join(Council, Councillor.council_id == Council.id)
            .where(or_(Council.name == council_name, Council.mapit_name == council_name))
            .where(or_(Councillor.ward_name.in_(candidates), Councillor.ward_mapit_name.in_(candidates)))
            .order_by(Councillor.name)
        )
        councillors = list((await self.session.exec(stmt)).all())
        if councillors:
            return councillors

        first_word = council_name.split(" ")[0]
        stmt = (
            select(Councillor)
            .join(Council, Councillor.council_id == Council.id)
            .where(or_(Council.name.contains(first_word), Council.mapit_name.contains(first_word)))
            .order_by(Councillor.name)
        )
        target = strip_ward_suffix(ward_name.lower())
        matches = []
        for councillor in (await self.session.exec(stmt)).all():
            ward = strip_ward_suffix(councillor.ward_name.lower())
            if target in ward or ward in target:
                matches.append(councillor)
        logger.debug(f"Fuzzy councillor match for {council_name}/{ward_name}: {len(matches)} found")
        return matches

    async def councillors_for(self, council: Council) -> List[Councillor]:
        stmt = select(Councillor).where(Councillor.council_id == council.id)
        return list((await self.session.exec(stmt)).all())

    async def search_councillors(
        self,
        council: Optional[str] = None,
        ward: Optional[str] = None,
        name: Optional[str] = None,
        party: Optional[str] = None,
        limit: int = 50,
    ) -> List[Tuple[Councillor, Council]]:
        """Case-insensitive contains search across councillors, ordered by name."""
        stmt = select(Councillor, Council).join(Council, Councillor.council_id == Council.id)
        if council:
            stmt = stmt.where(
                or_(
                    Council.name.icontains(council, autoescape=True),
                    Council.mapit_name.icontains(council, autoescape=True),
                )
            )
        stmt = QueryBuilder.apply_contains(stmt, Councillor.ward_name, ward)
        stmt = QueryBuilder.apply_contains(stmt, Councillor.name, name)
        stmt = QueryBuilder.apply_contains(stmt, Councillor.party, party)
        stmt = QueryBuilder.apply_pagination(stmt.order_by(Councillor.name), limit, None)
        result = await self.session.exec(stmt)
        return [(councillor, owner) for councillor, owner in result.all()]

    async def upsert_councillors(
        self, council: Council, incoming: Iterable[dict], source: str = "import", partial: bool = False
    ) -> Tuple[int, int]:
        """Create or refresh the councillors of a council, matched by name.

        Stored values are kept wherever the incoming value is empty, and the
        placeholder ward ``Unknown Ward`` never replaces a stored ward. The
        council is stamped with the import outcome.

        Returns:
            Tuple of (created, updated) counts
        """
        existing = {c.name: c for c in await self.councillors_for(council)}
        created = updated = 0
        now = utc_now()
        for data in incoming:
            current = existing.get(data["name"])
            if current is not None:
                current.party = data.get("party") or current.party
                if data.get("ward_name") and data["ward_name"] != UNKNOWN_WARD:
                    current.ward_name = data["ward_name"]
                current.ward_mapit_name = data.get("ward_mapit_name") or current.ward_mapit_name
                current.email = data.get("email") or current.email
                current.phone = data.get("phone") or current.phone
                current.profile_url = data.get("profile_url") or current.profile_url
                current.photo_url = data.get("photo_url") or current.photo_url
                current.updated_at = now
                self.session.add(current)
                updated += 1
            else:
                councillor = Councillor(
                    council_id=council.id,
                    name=data["name"],
                    title=data.get("title") or "Cllr",
                    first_name=data.get("first_name"),
                    last_name=data.get("last_name"),
                    party=data.get("party"),
                    ward_name=data["ward_name"],
                    ward_mapit_name=data.get("ward_mapit_name") or data["ward_name"],
                    email=data.get("email"),
                    phone=data.get("phone"),
                    profile_url=data.get("profile_url"),
                    photo_url=data.get("photo_url"),
                    source=source,
                )
                self.session.add(councillor)
                existing[councillor.name] = councillor
                created += 1

        council.import_status = "partial" if partial else "success"
        council.import_error = None
        council.last_updated = now
        self.session.add(council)
        await self.session.commit()
        await self.session.refresh(council)
        logger.info(f"Imported councillors for {council.name}: created={created}, updated={updated}")
        return created, updated
