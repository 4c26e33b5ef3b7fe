"""Schemas subpackage — Pydantic request/response models."""

from app.schemas.geojson import (
    BoundsOut,
    ConversionError,
    CRSInfo,
    Feature,
    FeatureCollection,
    ParcelConversionResponse,
    ParcelRecord,
    PopupEntry,
    PopupResponse,
)

__all__ = [
    "BoundsOut",
    "ConversionError",
    "CRSInfo",
    "Feature",
    "FeatureCollection",
    "ParcelConversionResponse",
    "ParcelRecord",
    "PopupEntry",
    "PopupResponse",
]
