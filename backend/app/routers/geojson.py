"""
GeoJSON Endpoints
=================
Generic reprojection of any GeoJSON object, plus the active CRS pair.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from app.schemas.geojson import CRSInfo
from app.services.parcels import ParcelConversionService, get_parcel_service
from app.spatial.errors import GeoJSONError

router = APIRouter(tags=["GeoJSON"])


@router.post("/geojson/reproject")
async def reproject_geojson(
    geojson: dict[str, Any] = Body(...),
    service: ParcelConversionService = Depends(get_parcel_service),
) -> dict[str, Any]:
    """
    Reproject a FeatureCollection, a Feature or a bare geometry from the
    source CRS to the target CRS.  Non-coordinate fields are returned as
    they were sent.
    """
    try:
        return service.reprojector.convert_geojson(geojson)
    except GeoJSONError as exc:
        raise HTTPException(422, str(exc)) from exc


@router.get("/crs", response_model=CRSInfo)
async def crs_info(
    service: ParcelConversionService = Depends(get_parcel_service),
):
    return CRSInfo(**service.reprojector.describe())
