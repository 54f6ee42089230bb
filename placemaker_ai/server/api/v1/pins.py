"""
API endpoints for moderating public map feedback.

Pins, lines and polygons are submitted through the public embed. The
project team lists them (with area or length for drawn shapes), hides or
re-approves them, and deletes them.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import PublicPin
from placemaker_ai.core.models.io.feedback import PinModerate, PinRead
from placemaker_ai.server.auth import ProjectDep
from placemaker_ai.server.services.geometry import drawing_metrics

router = APIRouter(tags=["pins"])


def _pin_read(pin: PublicPin) -> PinRead:
    return PinRead.model_validate(pin).model_copy(update=drawing_metrics(pin.geometry))


async def _get_pin(session: AsyncSession, project_id: int, pin_id: int) -> PublicPin:
    pin = await session.get(PublicPin, pin_id)
    if not pin or pin.project_id != project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Pin {pin_id} not found")
    return pin


@router.get(
    "/{project_id}/pins",
    response_model=List[PinRead],
    summary="List Pins",
    description="List public map feedback for the project, newest first, with area or length for drawn shapes.",
    response_description="A list of pins.",
)
async def list_pins(
    ctx: ProjectDep,
    approved: Optional[bool] = None,
    session: AsyncSession = Depends(get_session),
) -> List[PinRead]:
    """
    List pins.

    - **approved**: Optional moderation filter.
    """
    statement = select(PublicPin).where(PublicPin.project_id == ctx.project_id)
    if approved is not None:
        statement = statement.where(PublicPin.approved == approved)
    statement = statement.order_by(PublicPin.created_at.desc(), PublicPin.id.desc())
    result = await session.exec(statement)
    return [_pin_read(pin) for pin in result.all()]


@router.patch(
    "/{project_id}/pins/{pin_id}",
    response_model=PinRead,
    summary="Moderate Pin",
    description="Approve or hide a pin. Hidden pins are not shown in the public embed.",
    response_description="The updated pin.",
    responses={404: {"description": "Pin not found in this project"}},
)
async def moderate_pin(
    pin_id: int, data: PinModerate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> PinRead:
    """
    Moderate a pin.

    - **approved**: Whether the pin is publicly visible.
    """
    pin = await _get_pin(session, ctx.project_id, pin_id)
    pin.approved = data.approved
    session.add(pin)
    await session.commit()
    await session.refresh(pin)
    return _pin_read(pin)


@router.delete(
    "/{project_id}/pins/{pin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Pin",
    description="Permanently delete a pin.",
    responses={404: {"description": "Pin not found in this project"}},
)
async def delete_pin(pin_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    pin = await _get_pin(session, ctx.project_id, pin_id)
    await session.delete(pin)
    await session.commit()
