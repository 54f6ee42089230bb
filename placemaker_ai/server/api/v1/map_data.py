"""
API endpoints for project map content.

- Markers: points, lines and polygons annotating the site
- Image overlays: plans and renders pinned to map bounds
- GeoJSON layers: boundaries and constraints imported from GIS files
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.database.entities import GeoLayer, ImageOverlay, MapMarker
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.io.map_data import (
    LayerCreate,
    LayerRead,
    LayerUpdate,
    MarkerCreate,
    MarkerRead,
    OverlayCreate,
    OverlayRead,
    OverlayUpdate,
)
from placemaker_ai.server.auth import ProjectDep

logger = get_logger(__name__)

router = APIRouter(tags=["map-data"])

MAX_OVERLAY_IMAGE_SIZE = 5 * 1024 * 1024
GEOJSON_CONTAINER_TYPES = ("FeatureCollection", "Feature", "GeometryCollection")
DEFAULT_LAYER_STYLE: Dict[str, Any] = {
    "fillColor": "#3B82F6",
    "strokeColor": "#1E40AF",
    "fillOpacity": 0.3,
    "strokeWidth": 2,
}


async def _get_owned(session: AsyncSession, model, project_id: int, item_id: int, label: str):
    item = await session.get(model, item_id)
    if not item or item.project_id != project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} {item_id} not found")
    return item


# =====================================================================
# Markers
# =====================================================================


@router.get(
    "/{project_id}/markers",
    response_model=List[MarkerRead],
    summary="List Markers",
    description="List the project's map markers, oldest first.",
)
async def list_markers(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[MarkerRead]:
    statement = (
        select(MapMarker).where(MapMarker.project_id == ctx.project_id).order_by(MapMarker.created_at, MapMarker.id)
    )
    return [MarkerRead.model_validate(m) for m in (await session.exec(statement)).all()]


@router.post(
    "/{project_id}/markers",
    response_model=MarkerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Marker",
    description="Add a marker. Type defaults to point and colour to #3B82F6.",
)
async def create_marker(data: MarkerCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> MarkerRead:
    marker = MapMarker(project_id=ctx.project_id, **data.model_dump())
    session.add(marker)
    await session.commit()
    await session.refresh(marker)
    return MarkerRead.model_validate(marker)


@router.delete(
    "/{project_id}/markers/{marker_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Marker",
    responses={404: {"description": "Marker not found in this project"}},
)
async def delete_marker(marker_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    marker = await _get_owned(session, MapMarker, ctx.project_id, marker_id, "Marker")
    await session.delete(marker)
    await session.commit()


# =====================================================================
# Image Overlays
# =====================================================================


@router.get(
    "/{project_id}/overlays",
    response_model=List[OverlayRead],
    summary="List Overlays",
    description="List the project's image overlays, oldest first.",
)
async def list_overlays(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[OverlayRead]:
    statement = (
        select(ImageOverlay)
        .where(ImageOverlay.project_id == ctx.project_id)
        .order_by(ImageOverlay.created_at, ImageOverlay.id)
    )
    return [OverlayRead.model_validate(o) for o in (await session.exec(statement)).all()]


@router.post(
    "/{project_id}/overlays",
    response_model=OverlayRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Overlay",
    description="Pin an image to map bounds given as [[south, west], [north, east]].",
    responses={400: {"description": "Image over 5 MB"}},
)
async def create_overlay(
    data: OverlayCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> OverlayRead:
    """
    Create an image overlay.

    - **name**: Overlay name.
    - **image_url**: Image URL or base64 data URI.
    - **bounds**: South-west and north-east corners.
    - **opacity**: 0 to 1, defaults to 0.7.
    """
    if len(data.image_url) > MAX_OVERLAY_IMAGE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image too large. Please use an image under 5MB.",
        )
    (south, west), (north, east) = data.bounds
    overlay = ImageOverlay(
        project_id=ctx.project_id,
        name=data.name,
        image_url=data.image_url,
        south_lat=south,
        west_lng=west,
        north_lat=north,
        east_lng=east,
        opacity=data.opacity,
        rotation=data.rotation,
        visible=data.visible,
    )
    session.add(overlay)
    await session.commit()
    await session.refresh(overlay)
    return OverlayRead.model_validate(overlay)


@router.patch(
    "/{project_id}/overlays/{overlay_id}",
    response_model=OverlayRead,
    summary="Update Overlay",
    description="Update name, opacity, rotation, visibility or bounds.",
    responses={404: {"description": "Overlay not found in this project"}},
)
async def update_overlay(
    overlay_id: int, data: OverlayUpdate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> OverlayRead:
    overlay = await _get_owned(session, ImageOverlay, ctx.project_id, overlay_id, "Overlay")
    update_data = data.model_dump(exclude_unset=True)
    bounds = update_data.pop("bounds", None)
    for key, value in update_data.items():
        setattr(overlay, key, value)
    if bounds is not None:
        overlay.set_bounds(bounds)
    session.add(overlay)
    await session.commit()
    await session.refresh(overlay)
    return OverlayRead.model_validate(overlay)


@router.delete(
    "/{project_id}/overlays/{overlay_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Overlay",
    responses={404: {"description": "Overlay not found in this project"}},
)
async def delete_overlay(overlay_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    overlay = await _get_owned(session, ImageOverlay, ctx.project_id, overlay_id, "Overlay")
    await session.delete(overlay)
    await session.commit()


# =====================================================================
# GeoJSON Layers
# =====================================================================


@router.get(
    "/{project_id}/layers",
    response_model=List[LayerRead],
    summary="List Layers",
    description="List the project's GeoJSON layers, newest first.",
)
async def list_layers(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[LayerRead]:
    statement = (
        select(GeoLayer)
        .where(GeoLayer.project_id == ctx.project_id)
        .order_by(GeoLayer.created_at.desc(), GeoLayer.id.desc())
    )
    return [LayerRead.model_validate(layer) for layer in (await session.exec(statement)).all()]


@router.post(
    "/{project_id}/layers",
    response_model=LayerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Layer",
    description=(
        "Store a GeoJSON FeatureCollection, Feature or GeometryCollection. A single Feature is "
        "wrapped in a FeatureCollection."
    ),
    responses={400: {"description": "Name or GeoJSON missing, or unsupported GeoJSON type"}},
)
async def create_layer(data: LayerCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> LayerRead:
    """
    Create a layer.

    - **name**: Layer name.
    - **geojson**: GeoJSON object.
    - **type**: boundary (default), constraint, context, proposal or other.
    - **style**: Map style; a blue fill is used when omitted.
    """
    if not data.name or not data.geojson:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields: name, geojson")
    geojson = data.geojson
    if geojson.get("type") not in GEOJSON_CONTAINER_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid GeoJSON: must be FeatureCollection, Feature, or GeometryCollection",
        )
    if geojson["type"] == "Feature":
        geojson = {"type": "FeatureCollection", "features": [geojson]}

    layer = GeoLayer(
        project_id=ctx.project_id,
        name=data.name,
        type=data.type,
        geojson=geojson,
        style=data.style or dict(DEFAULT_LAYER_STYLE),
        visible=data.visible,
    )
    session.add(layer)
    await session.commit()
    await session.refresh(layer)
    logger.debug(f"Created layer '{layer.name}' for project {ctx.project_id}")
    return LayerRead.model_validate(layer)


@router.patch(
    "/{project_id}/layers/{layer_id}",
    response_model=LayerRead,
    summary="Update Layer",
    description="Update name, type, style or visibility.",
    responses={404: {"description": "Layer not found in this project"}},
)
async def update_layer(
    layer_id: int, data: LayerUpdate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> LayerRead:
    layer = await _get_owned(session, GeoLayer, ctx.project_id, layer_id, "Layer")
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(layer, key, value)
    session.add(layer)
    await session.commit()
    await session.refresh(layer)
    return LayerRead.model_validate(layer)


@router.delete(
    "/{project_id}/layers/{layer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Layer",
    responses={404: {"description": "Layer not found in this project"}},
)
async def delete_layer(layer_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    layer = await _get_owned(session, GeoLayer, ctx.project_id, layer_id, "Layer")
    await session.delete(layer)
    await session.commit()
