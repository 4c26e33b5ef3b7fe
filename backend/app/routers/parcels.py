"""
Parcel Endpoints
================
Turn already-fetched parcel records into display-ready WGS84 GeoJSON.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.geojson import (
    Feature,
    ParcelConversionResponse,
    ParcelRecord,
    PopupResponse,
)
from app.services.parcels import ParcelConversionService, get_parcel_service
from app.spatial.errors import GeoJSONError

router = APIRouter(prefix="/parcels", tags=["Parcels"])


# ── Batch conversion ──────────────────────────────────────────────
@router.post("/convert", response_model=ParcelConversionResponse)
async def convert_parcels(
    records: list[ParcelRecord],
    service: ParcelConversionService = Depends(get_parcel_service),
):
    """
    Convert a JSON array of flat parcel records.

    Records with a missing or malformed geometry are skipped and listed in
    ``errors`` unless strict batches are enabled, in which case the whole
    request fails with 422.
    """
    try:
        return service.convert_batch_response(
            record.to_record() for record in records
        )
    except GeoJSONError as exc:
        raise HTTPException(422, str(exc)) from exc


# ── Single record ─────────────────────────────────────────────────
@router.post("/feature", response_model=Feature)
async def convert_parcel(
    record: ParcelRecord,
    service: ParcelConversionService = Depends(get_parcel_service),
):
    try:
        return service.convert_record(record.to_record())
    except GeoJSONError as exc:
        raise HTTPException(422, str(exc)) from exc


# ── Popup content ─────────────────────────────────────────────────
@router.post("/popup", response_model=PopupResponse)
async def parcel_popup(
    feature: Feature,
    service: ParcelConversionService = Depends(get_parcel_service),
):
    """Property listing shown when a parcel is clicked on the map."""
    return service.popup(feature.model_dump())
