"""
API endpoints for AI feedback analytics.

The analysis of a project's feedback (pins, form responses and enquiries)
is cached per project together with a hash of the feedback it was built
from, so clients can tell when it is stale and ask for a rerun.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.analytics import collect_feedback, feedback_hash
from placemaker_ai.core.database import get_session, utc_now
from placemaker_ai.core.database.entities import AnalysisResult
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import Permission
from placemaker_ai.core.models.io.analytics import AnalyticsRead, AnalyticsRunResponse
from placemaker_ai.server.auth import ProjectContext, require_project_permission
from placemaker_ai.server.services.deps import AnalyzerDep

logger = get_logger(__name__)

router = APIRouter(tags=["analytics"])

ANALYSIS_TYPE = "full"


async def _cached(session: AsyncSession, project_id: int):
    statement = select(AnalysisResult).where(
        AnalysisResult.project_id == project_id, AnalysisResult.type == ANALYSIS_TYPE
    )
    return (await session.exec(statement)).first()


@router.get(
    "/{project_id}/analytics",
    response_model=AnalyticsRead,
    summary="Get Analysis",
    description="Return the cached analysis and whether feedback has changed since it was built.",
    response_description="Cached analysis with staleness flag.",
    responses={403: {"description": "Missing analytics:view permission"}},
)
async def get_analysis(
    ctx: ProjectContext = Depends(require_project_permission(Permission.analytics_view)),
    session: AsyncSession = Depends(get_session),
) -> AnalyticsRead:
    items = await collect_feedback(session, ctx.project_id)
    cached = await _cached(session, ctx.project_id)
    current_hash = feedback_hash(items)
    return AnalyticsRead(
        analysis=cached.data if cached else None,
        needs_update=cached is None or cached.feedback_hash != current_hash,
        last_analyzed=cached.updated_at if cached else None,
        feedback_count=len(items),
    )


@router.post(
    "/{project_id}/analytics",
    response_model=AnalyticsRunResponse,
    summary="Run Analysis",
    description=(
        "Analyse all current feedback: sentiment, themes, an executive summary and location "
        "clusters. The result replaces the cached analysis."
    ),
    response_description="The new analysis.",
    responses={403: {"description": "Missing analytics:view permission"}},
)
async def run_analysis(
    analyzer: AnalyzerDep,
    ctx: ProjectContext = Depends(require_project_permission(Permission.analytics_view)),
    session: AsyncSession = Depends(get_session),
) -> AnalyticsRunResponse:
    items = await collect_feedback(session, ctx.project_id)
    if not items:
        return AnalyticsRunResponse(analysis=None, message="No feedback to analyze", feedback_count=0)

    result = await analyzer.run(items, project_id=ctx.project_id)
    data = result.model_dump(by_alias=True, mode="json")
    now = utc_now()

    cached = await _cached(session, ctx.project_id)
    if cached is None:
        cached = AnalysisResult(project_id=ctx.project_id, type=ANALYSIS_TYPE, data=data, feedback_hash="")
    cached.data = data
    cached.feedback_hash = feedback_hash(items)
    cached.updated_at = now
    session.add(cached)
    await session.commit()
    await session.refresh(cached)

    return AnalyticsRunResponse(
        analysis=cached.data,
        feedback_count=len(items),
        last_analyzed=cached.updated_at,
    )
