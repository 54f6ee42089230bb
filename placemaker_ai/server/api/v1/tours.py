"""
API endpoints for guided map tours.

A tour is an ordered list of stops; each stop flies the public map to a
location and zoom and can highlight an area or show an overlay. Deleting or
reordering stops renumbers them from 0; a new stop keeps an explicit order.
"""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import Tour, TourStop
from placemaker_ai.core.models.io.tours import (
    StopReorder,
    TourCreate,
    TourRead,
    TourStopCreate,
    TourStopRead,
    TourStopUpdate,
    TourUpdate,
)
from placemaker_ai.server.auth import ProjectDep

router = APIRouter(tags=["tours"])


async def ordered_stops(session: AsyncSession, tour_ids: List[int]) -> Dict[int, List[TourStop]]:
    """Stops of each tour, in tour order."""
    grouped: Dict[int, List[TourStop]] = {tour_id: [] for tour_id in tour_ids}
    if not tour_ids:
        return grouped
    statement = select(TourStop).where(TourStop.tour_id.in_(tour_ids)).order_by(TourStop.order, TourStop.id)
    for stop in (await session.exec(statement)).all():
        grouped[stop.tour_id].append(stop)
    return grouped


def tour_read(tour: Tour, stops: List[TourStop]) -> TourRead:
    return TourRead.model_validate(tour).model_copy(
        update={"stops": [TourStopRead.model_validate(s) for s in stops]}
    )


async def _get_tour(session: AsyncSession, project_id: int, tour_id: int) -> Tour:
    tour = await session.get(Tour, tour_id)
    if not tour or tour.project_id != project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")
    return tour


async def _get_stop(session: AsyncSession, tour_id: int, stop_id: int) -> TourStop:
    stop = await session.get(TourStop, stop_id)
    if not stop or stop.tour_id != tour_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stop not found")
    return stop


async def _renumber(session: AsyncSession, tour_id: int) -> List[TourStop]:
    stops = (await ordered_stops(session, [tour_id]))[tour_id]
    for index, stop in enumerate(stops):
        if stop.order != index:
            stop.order = index
            session.add(stop)
    return stops


# =====================================================================
# Tours
# =====================================================================


@router.get(
    "/{project_id}/tours",
    response_model=List[TourRead],
    summary="List Tours",
    description="List the project's tours with their stops, newest first.",
    response_description="A list of tours.",
)
async def list_tours(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[TourRead]:
    statement = select(Tour).where(Tour.project_id == ctx.project_id).order_by(Tour.created_at.desc(), Tour.id.desc())
    tours = (await session.exec(statement)).all()
    stops = await ordered_stops(session, [t.id for t in tours])
    return [tour_read(t, stops[t.id]) for t in tours]


@router.post(
    "/{project_id}/tours",
    response_model=TourRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Tour",
    description="Create an empty tour.",
)
async def create_tour(data: TourCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> TourRead:
    """
    Create a tour.

    - **name**: Tour name.
    - **description**: Optional introduction.
    - **active**: Whether the public embed shows it.
    """
    tour = Tour(project_id=ctx.project_id, **data.model_dump())
    session.add(tour)
    await session.commit()
    await session.refresh(tour)
    return tour_read(tour, [])


@router.get(
    "/{project_id}/tours/{tour_id}",
    response_model=TourRead,
    summary="Get Tour",
    responses={404: {"description": "Tour not found in this project"}},
)
async def get_tour(tour_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> TourRead:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    stops = await ordered_stops(session, [tour.id])
    return tour_read(tour, stops[tour.id])


@router.patch(
    "/{project_id}/tours/{tour_id}",
    response_model=TourRead,
    summary="Update Tour",
    responses={404: {"description": "Tour not found in this project"}},
)
async def update_tour(
    tour_id: int, data: TourUpdate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> TourRead:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(tour, key, value)
    session.add(tour)
    await session.commit()
    await session.refresh(tour)
    stops = await ordered_stops(session, [tour.id])
    return tour_read(tour, stops[tour.id])


@router.delete(
    "/{project_id}/tours/{tour_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Tour",
    description="Delete a tour and its stops.",
    responses={404: {"description": "Tour not found in this project"}},
)
async def delete_tour(tour_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    await session.delete(tour)
    await session.commit()


# =====================================================================
# Stops
# =====================================================================


@router.get(
    "/{project_id}/tours/{tour_id}/stops",
    response_model=List[TourStopRead],
    summary="List Stops",
    responses={404: {"description": "Tour not found in this project"}},
)
async def list_stops(tour_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[TourStopRead]:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    stops = await ordered_stops(session, [tour.id])
    return [TourStopRead.model_validate(s) for s in stops[tour.id]]


@router.post(
    "/{project_id}/tours/{tour_id}/stops",
    response_model=TourStopRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Stop",
    description="Append a stop to the tour, or place it at an explicit order.",
    responses={404: {"description": "Tour not found in this project"}},
)
async def add_stop(
    tour_id: int, data: TourStopCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> TourStopRead:
    """
    Add a stop.

    - **title**: Stop title.
    - **latitude**, **longitude**: Where the map flies to.
    - **zoom**: Map zoom, defaults to 16.
    - **order**: Position; defaults to after the last stop.
    """
    tour = await _get_tour(session, ctx.project_id, tour_id)
    values = data.model_dump()
    if values["order"] is None:
        highest = (
            await session.exec(select(func.max(TourStop.order)).where(TourStop.tour_id == tour.id))
        ).one()
        values["order"] = 0 if highest is None else highest + 1
    stop = TourStop(tour_id=tour.id, **values)
    session.add(stop)
    await session.commit()
    await session.refresh(stop)
    return TourStopRead.model_validate(stop)


@router.get(
    "/{project_id}/tours/{tour_id}/stops/{stop_id}",
    response_model=TourStopRead,
    summary="Get Stop",
    responses={404: {"description": "Tour or stop not found"}},
)
async def get_stop(
    tour_id: int, stop_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> TourStopRead:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    return TourStopRead.model_validate(await _get_stop(session, tour.id, stop_id))


@router.patch(
    "/{project_id}/tours/{tour_id}/stops/{stop_id}",
    response_model=TourStopRead,
    summary="Update Stop",
    responses={404: {"description": "Tour or stop not found"}},
)
async def update_stop(
    tour_id: int,
    stop_id: int,
    data: TourStopUpdate,
    ctx: ProjectDep,
    session: AsyncSession = Depends(get_session),
) -> TourStopRead:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    stop = await _get_stop(session, tour.id, stop_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(stop, key, value)
    session.add(stop)
    await session.commit()
    await session.refresh(stop)
    return TourStopRead.model_validate(stop)


@router.delete(
    "/{project_id}/tours/{tour_id}/stops/{stop_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Stop",
    description="Delete a stop; the remaining stops are renumbered from 0.",
    responses={404: {"description": "Tour or stop not found"}},
)
async def delete_stop(
    tour_id: int, stop_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> None:
    tour = await _get_tour(session, ctx.project_id, tour_id)
    stop = await _get_stop(session, tour.id, stop_id)
    await session.delete(stop)
    await session.flush()
    await _renumber(session, tour.id)
    await session.commit()


@router.post(
    "/{project_id}/tours/{tour_id}/stops/reorder",
    response_model=List[TourStopRead],
    summary="Reorder Stops",
    description="Set the stop order from a list of stop ids.",
    response_description="The stops in their new order.",
    responses={
        400: {"description": "A stop id does not belong to the tour"},
        404: {"description": "Tour not found in this project"},
    },
)
async def reorder_stops(
    tour_id: int, data: StopReorder, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> List[TourStopRead]:
    """
    Reorder stops.

    - **stop_ids**: Stop ids in the new order. Stops left out follow, in their current order.
    """
    tour = await _get_tour(session, ctx.project_id, tour_id)
    stops = {s.id: s for s in (await ordered_stops(session, [tour.id]))[tour.id]}
    unknown = [stop_id for stop_id in data.stop_ids if stop_id not in stops]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Stops not in this tour: {', '.join(map(str, unknown))}",
        )
    listed = list(dict.fromkeys(data.stop_ids))
    rest = [stop_id for stop_id in stops if stop_id not in listed]
    for index, stop_id in enumerate(listed + rest):
        stops[stop_id].order = index
        session.add(stops[stop_id])
    await session.commit()
    reordered = await ordered_stops(session, [tour.id])
    return [TourStopRead.model_validate(s) for s in reordered[tour.id]]
