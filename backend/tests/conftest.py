"""
Shared fixtures for the Parcelmap test suite.

This conftest provides:
- A shared EPSG:2229 → WGS84 reprojector
- Reusable sample data factories (parcel records, polygons)
- Reference positions with their expected WGS84 values
"""
from __future__ import annotations

from typing import Any

import pytest

from app.config import EPSG_2229, WGS84
from app.services.parcels import ParcelConversionService
from app.spatial.reproject import Reprojector


# ---------------------------------------------------------------------------
# Reference positions (NAD83 / California zone V, US survey feet)
# ---------------------------------------------------------------------------
# Projection origin: lat_0 / lon_0 sit exactly at the false easting/northing.
ORIGIN_FT = (6561666.666666667, 1640416.666666667)
ORIGIN_LONLAT = (-118.0, 33.5)

# Downtown Los Angeles.
DOWNTOWN_FT = (6487000.0, 1840000.0)
DOWNTOWN_LONLAT = (-118.246484, 34.048160)

# West of downtown (Mid-City).
MID_CITY_FT = (6442000.0, 1848000.0)
MID_CITY_LONLAT = (-118.395138, 34.069748)

# Degrees.  Loose enough to absorb the NAD83 → WGS84 datum step.
LONLAT_TOL = 1e-3


def square_ring(
    x: float = DOWNTOWN_FT[0], y: float = DOWNTOWN_FT[1], size: float = 100.0
) -> list[list[float]]:
    """Closed counter-clockwise square ring anchored at (x, y)."""
    return [
        [x, y],
        [x + size, y],
        [x + size, y + size],
        [x, y + size],
        [x, y],
    ]


def make_polygon(**kwargs: Any) -> dict[str, Any]:
    return {"type": "Polygon", "coordinates": [square_ring(**kwargs)]}


def make_parcel_record(
    *,
    parcel_id: str = "123",
    area: float = 500,
    geometry: dict[str, Any] | None = None,
    with_geometry: bool = True,
    **extra: Any,
) -> dict[str, Any]:
    """Return a flat record as served by the upstream ``/property`` endpoint."""
    record: dict[str, Any] = {"parcelId": parcel_id, "area": area, **extra}
    if with_geometry:
        record["geometry"] = geometry if geometry is not None else make_polygon()
    return record


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def reprojector() -> Reprojector:
    return Reprojector(EPSG_2229, WGS84)


@pytest.fixture()
def service(reprojector) -> ParcelConversionService:
    return ParcelConversionService(reprojector)


@pytest.fixture()
def strict_service(reprojector) -> ParcelConversionService:
    return ParcelConversionService(reprojector, strict=True)
