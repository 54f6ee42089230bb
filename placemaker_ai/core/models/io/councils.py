"""
Council and councillor I/O models.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import UtcDatetime


class CouncilInfo(BaseModel):
    """Entry of the built-in council registry."""

    name: str
    mapit_name: str
    type: str
    website: str
    councillors_url: str
    source_type: str
    gss_code: Optional[str] = None


class CouncilRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    mapit_name: Optional[str] = None
    type: Optional[str] = None
    website: Optional[str] = None
    councillors_url: Optional[str] = None
    source_type: Optional[str] = None
    gss_code: Optional[str] = None
    import_status: str
    import_error: Optional[str] = None
    last_updated: Optional[UtcDatetime] = None
    councillor_count: int = 0


class CouncilStats(BaseModel):
    total_councils: int
    total_councillors: int
    imported_councils: int
    failed_councils: int
    last_updated: Optional[UtcDatetime] = None


class CouncilListResponse(BaseModel):
    councils: List[CouncilRead]
    stats: CouncilStats
    registry: List[CouncilInfo]


class CouncilActionRequest(BaseModel):
    action: Literal["init"]


class CouncilActionResponse(BaseModel):
    message: str
    total: int


class CouncillorIn(BaseModel):
    """Councillor as supplied to an import."""

    name: str = Field(min_length=1)
    ward_name: str = Field(min_length=1)
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    party: Optional[str] = None
    ward_mapit_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_url: Optional[str] = None
    photo_url: Optional[str] = None


class CouncillorImportRequest(BaseModel):
    council: str = Field(min_length=1, description="Council name or MapIt name")
    councillors: List[CouncillorIn]
    source: str = Field(default="import")
    complete: bool = Field(default=True, description="False marks the import as partial")


class CouncillorImportResponse(BaseModel):
    council: str
    created: int
    updated: int
    import_status: str


class CouncillorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    council_id: int
    name: str
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    party: Optional[str] = None
    ward_name: str
    ward_mapit_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_url: Optional[str] = None
    photo_url: Optional[str] = None
    source: str


class CouncillorLookupResponse(BaseModel):
    council: str
    ward: str
    councillors: List[CouncillorRead]
    count: int


class CouncillorSearchRequest(BaseModel):
    council: Optional[str] = None
    ward: Optional[str] = None
    name: Optional[str] = None
    party: Optional[str] = None


class CouncillorSearchHit(BaseModel):
    id: int
    name: str
    party: Optional[str] = None
    ward_name: str
    email: Optional[str] = None
    profile_url: Optional[str] = None
    council: str
    council_type: Optional[str] = None


class CouncillorSearchResponse(BaseModel):
    councillors: List[CouncillorSearchHit]
    count: int
