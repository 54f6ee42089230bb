"""
API endpoints for councils and councillors.

The councillor database backs the ward-councillor step of stakeholder
auto-detection. Councils come from the built-in registry; councillors are
loaded through the import endpoint.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.repositories import CouncilRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.io.councils import (
    CouncilActionRequest,
    CouncilActionResponse,
    CouncillorImportRequest,
    CouncillorImportResponse,
    CouncillorLookupResponse,
    CouncillorRead,
    CouncillorSearchHit,
    CouncillorSearchRequest,
    CouncillorSearchResponse,
    CouncilListResponse,
    CouncilRead,
    CouncilStats,
)
from placemaker_ai.server.auth import require_super_admin
from placemaker_ai.server.services.council_registry import COUNCIL_REGISTRY, init_councils, resolve_council

logger = get_logger(__name__)

router = APIRouter(tags=["councils"])


@router.get(
    "",
    response_model=CouncilListResponse,
    summary="List Councils",
    description="List councils with councillor counts, import statistics and the built-in registry.",
    response_description="Councils, statistics and registry entries.",
)
async def list_councils(session: AsyncSession = Depends(get_session)) -> CouncilListResponse:
    """
    List councils.

    Returns every stored council ordered by name, the import statistics
    (total councils, total councillors, imported and failed councils, last
    update) and the registry of known councils.
    """
    repo = CouncilRepository(session)
    councils = [
        CouncilRead.model_validate(council).model_copy(update={"councillor_count": count})
        for council, count in await repo.list_with_counts()
    ]
    return CouncilListResponse(
        councils=councils,
        stats=CouncilStats(**await repo.stats()),
        registry=COUNCIL_REGISTRY,
    )


@router.post(
    "",
    response_model=CouncilActionResponse,
    summary="Council Action",
    description="Run a council maintenance action. `init` creates every registry council not yet stored.",
    response_description="Outcome of the action.",
    responses={403: {"description": "Caller is not a super admin"}},
    dependencies=[Depends(require_super_admin)],
)
async def council_action(data: CouncilActionRequest, session: AsyncSession = Depends(get_session)) -> CouncilActionResponse:
    """
    Run a council action.

    - **action**: `init` to seed the councils table from the registry.
    """
    created = await init_councils(session)
    return CouncilActionResponse(message=f"Initialized {created} councils", total=len(COUNCIL_REGISTRY))


@router.post(
    "/import",
    response_model=CouncillorImportResponse,
    summary="Import Councillors",
    description=(
        "Upsert a batch of councillors for a council, creating the council from the registry when needed. "
        "Stored values are kept where incoming values are empty."
    ),
    response_description="Created and updated counts with the council's new import status.",
    responses={
        403: {"description": "Caller is not a super admin"},
        404: {"description": "Council neither stored nor in the registry"},
    },
    dependencies=[Depends(require_super_admin)],
)
async def import_councillors(
    data: CouncillorImportRequest, session: AsyncSession = Depends(get_session)
) -> CouncillorImportResponse:
    """
    Import councillors.

    - **council**: Council name or MapIt name.
    - **councillors**: Councillors with at least a name and ward.
    - **source**: Label stored on new councillors (default `import`).
    - **complete**: False marks the council's import as partial.
    """
    council = await resolve_council(session, data.council)
    if council is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Council not found: {data.council}")
    created, updated = await CouncilRepository(session).upsert_councillors(
        council,
        [c.model_dump() for c in data.councillors],
        source=data.source,
        partial=not data.complete,
    )
    return CouncillorImportResponse(
        council=council.name, created=created, updated=updated, import_status=council.import_status
    )


@router.get(
    "/councillors",
    response_model=CouncillorLookupResponse,
    summary="Find Ward Councillors",
    description="Find the councillors for a council and ward, trying exact then fuzzy ward matching.",
    response_description="Matching councillors.",
    responses={400: {"description": "Council or ward missing"}},
)
async def find_ward_councillors(
    council: Optional[str] = None,
    ward: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
) -> CouncillorLookupResponse:
    """
    Find councillors for a ward.

    - **council**: Council name as reported by MapIt.
    - **ward**: Ward name as reported by MapIt.
    """
    if not council or not ward:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="council and ward parameters required")
    councillors = await CouncilRepository(session).find_councillors(council, ward)
    return CouncillorLookupResponse(
        council=council,
        ward=ward,
        councillors=[CouncillorRead.model_validate(c) for c in councillors],
        count=len(councillors),
    )


@router.post(
    "/councillors/search",
    response_model=CouncillorSearchResponse,
    summary="Search Councillors",
    description="Case-insensitive search by council, ward, name and party. At most 50 results, ordered by name.",
    response_description="Matching councillors with their council.",
)
async def search_councillors(
    data: CouncillorSearchRequest, session: AsyncSession = Depends(get_session)
) -> CouncillorSearchResponse:
    hits = [
        CouncillorSearchHit(
            id=councillor.id,
            name=councillor.name,
            party=councillor.party,
            ward_name=councillor.ward_name,
            email=councillor.email,
            profile_url=councillor.profile_url,
            council=council.name,
            council_type=council.type,
        )
        for councillor, council in await CouncilRepository(session).search_councillors(
            council=data.council, ward=data.ward, name=data.name, party=data.party
        )
    ]
    return CouncillorSearchResponse(councillors=hits, count=len(hits))
