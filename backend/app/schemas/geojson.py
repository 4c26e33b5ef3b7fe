"""
Pydantic schemas for API request/response serialization.

Geometry is kept as loosely typed JSON on purpose: the reprojector works on
nesting shape, not on the declared geometry type.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════
class ParcelRecord(BaseModel):
    """
    A flat parcel record as fetched from the parcel API.

    Any number of named properties plus one reserved ``geometry`` key.
    Property keys are not known ahead of time, so extras are kept in the
    order they arrived.
    """

    model_config = ConfigDict(extra="allow")

    geometry: Any = Field(
        default=None,
        description="Geometry in the source CRS: {type, coordinates}",
    )

    def to_record(self) -> dict[str, Any]:
        """Plain dict for the feature adapter; an absent geometry stays absent."""
        return self.model_dump(exclude_unset=True)


# ═══════════════════════════════════════════════════════════════════
# GeoJSON
# ═══════════════════════════════════════════════════════════════════
class Feature(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["Feature"] = "Feature"
    properties: dict[str, Any] | None = Field(default_factory=dict)
    geometry: dict[str, Any] | None = None


class FeatureCollection(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════
# Batch conversion
# ═══════════════════════════════════════════════════════════════════
class ConversionError(BaseModel):
    """A record that was skipped, and why."""

    index: int = Field(description="Position of the record in the request")
    error: str = Field(description="Exception class name")
    message: str


class BoundsOut(BaseModel):
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    leaflet: list[list[float]] = Field(
        description="[[south, west], [north, east]] for map.fitBounds"
    )


class ParcelConversionResponse(BaseModel):
    """Converted parcels, ready for a GeoJSON layer."""

    collection: FeatureCollection
    converted: int
    skipped: int
    errors: list[ConversionError] = Field(default_factory=list)
    bounds: BoundsOut | None = None


# ═══════════════════════════════════════════════════════════════════
# Popups
# ═══════════════════════════════════════════════════════════════════
class PopupEntry(BaseModel):
    key: str
    value: Any = None


class PopupResponse(BaseModel):
    entries: list[PopupEntry]
    html: str


# ═══════════════════════════════════════════════════════════════════
# CRS info
# ═══════════════════════════════════════════════════════════════════
class CRSInfo(BaseModel):
    source: str
    source_name: str
    target: str
    target_name: str
