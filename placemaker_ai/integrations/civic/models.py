"""Civic-data DTO models

Pydantic DTOs for the subset of each API response the platform reads. Field
aliases follow the wire schema; unknown fields are ignored.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

COUNCIL_AREA_TYPES = ("DIS", "MTD", "UTA", "LBO", "CTY")
WARD_AREA_TYPES = ("DIW", "MTW", "UTW", "LBW")
PARISH_AREA_TYPE = "CPC"

# Area types requested from MapIt for a point lookup
MAPIT_AREA_TYPES = (
    "WMC",
    "CTY",
    "DIS",
    "MTD",
    "UTA",
    "LBO",
    "COI",
    "LGD",
    "DIW",
    "MTW",
    "UTW",
    "LBW",
    "UTE",
    "UTS",
    "CPC",
)


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PartyDTO(_WireModel):
    name: str


class HouseMembershipDTO(_WireModel):
    membership_from: Optional[str] = Field(default=None, alias="membershipFrom")


class MemberDTO(_WireModel):
    """Member of Parliament as returned by ``/api/Members/Search``."""

    id: int
    name_display_as: str = Field(alias="nameDisplayAs")
    latest_party: Optional[PartyDTO] = Field(default=None, alias="latestParty")
    latest_house_membership: Optional[HouseMembershipDTO] = Field(default=None, alias="latestHouseMembership")

    @property
    def constituency(self) -> Optional[str]:
        return self.latest_house_membership.membership_from if self.latest_house_membership else None

    @property
    def contact_url(self) -> str:
        return f"https://members.parliament.uk/member/{self.id}/contact"


class MapItArea(_WireModel):
    name: str
    type: str
    type_name: Optional[str] = None
    codes: Dict[str, str] = Field(default_factory=dict)


class AreaLookup(BaseModel):
    """Administrative areas containing a point, reduced to what stakeholder detection needs."""

    council: Optional[str] = None
    ward: Optional[str] = None
    parishes: List[str] = Field(default_factory=list)

    @classmethod
    def from_areas(cls, areas: List[MapItArea]) -> "AreaLookup":
        """Reduce MapIt areas in response order; the last council and ward area win."""
        lookup = cls()
        for area in areas:
            if area.type in COUNCIL_AREA_TYPES:
                lookup.council = area.name
            if area.type in WARD_AREA_TYPES:
                lookup.ward = area.name
            if area.type == PARISH_AREA_TYPE:
                lookup.parishes.append(area.name)
        return lookup
