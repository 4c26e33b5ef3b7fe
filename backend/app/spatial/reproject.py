"""
Coordinate Reprojection Engine
==============================
Moves parcel geometry between two coordinate reference systems:

1. **Source** — the state-plane CRS the parcel records are stored in
   (by default NAD83 / California zone V, US survey feet).
2. **Target** — geographic WGS84, in GeoJSON's (longitude, latitude) order.

The walk over GeoJSON is structural: ``FeatureCollection`` → ``Feature`` →
geometry → coordinate tree → position.  Only positions change.  Every other
field at every level is carried over into a shallow copy, so the input is
never mutated and ``properties`` objects are shared with the output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pyproj import CRS, Transformer

from app.config import EPSG_2229, WGS84, Settings, get_settings
from app.spatial.errors import MissingGeometryError
from app.spatial.tree import parse_coordinates

logger = logging.getLogger(__name__)


# ── Bounding box (map extent) ────────────────────────────────────
@dataclass(frozen=True, slots=True)
class Bounds:
    """A rectangle in target-CRS coordinates (lon/lat for WGS84)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def union(self, other: Bounds) -> Bounds:
        return Bounds(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def to_leaflet(self) -> list[list[float]]:
        """``[[south, west], [north, east]]`` as Leaflet's fitBounds wants."""
        return [[self.min_y, self.min_x], [self.max_y, self.max_x]]

    @classmethod
    def of_positions(cls, positions: Iterable[tuple[float, float]]) -> Bounds | None:
        xs: list[float] = []
        ys: list[float] = []
        for x, y in positions:
            xs.append(x)
            ys.append(y)
        if not xs:
            return None
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def of_geometry(cls, geometry: Any) -> Bounds | None:
        """
        Envelope of a geometry's positions, read from its nesting shape only.

        The ``type`` tag is ignored except to descend into a
        GeometryCollection's ``geometries``.
        """
        if not isinstance(geometry, Mapping):
            return None
        if geometry.get("type") == "GeometryCollection":
            return cls.of_features(
                {"geometry": member} for member in geometry.get("geometries") or []
            )
        coordinates = geometry.get("coordinates")
        if coordinates is None:
            return None
        return cls.of_positions(parse_coordinates(coordinates).positions())

    @classmethod
    def of_features(cls, features: Iterable[Mapping[str, Any]]) -> Bounds | None:
        """
        Envelope of every non-empty feature geometry, or ``None`` if there
        is nothing to frame.
        """
        result: Bounds | None = None
        for feature in features:
            b = cls.of_geometry(feature.get("geometry"))
            if b is None:
                continue
            result = b if result is None else result.union(b)
        return result


# ── Reprojector ──────────────────────────────────────────────────
class Reprojector:
    """
    Reprojects GeoJSON objects from *source_crs* to *target_crs*.

    Parameters
    ----------
    source_crs : str
        Anything ``pyproj.CRS.from_user_input`` accepts; defaults to the
        EPSG:2229 PROJ string.
    target_crs : str
        Defaults to ``"WGS84"``.
    """

    def __init__(self, source_crs: str = EPSG_2229, target_crs: str = WGS84) -> None:
        self.source_crs = CRS.from_user_input(source_crs)
        self.target_crs = CRS.from_user_input(target_crs)
        # always_xy keeps (x, y) / (lon, lat) order regardless of the
        # axis order declared by either CRS.
        self._forward = Transformer.from_crs(
            self.source_crs, self.target_crs, always_xy=True
        )
        self._inverse = Transformer.from_crs(
            self.target_crs, self.source_crs, always_xy=True
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Reprojector:
        settings = settings or get_settings()
        return cls(settings.source_crs, settings.target_crs)

    # ── Positions ─────────────────────────────────────────────

    def project_point(self, x: float, y: float) -> tuple[float, float]:
        """Source (x, y) → target (lon, lat)."""
        lon, lat = self._forward.transform(x, y)
        return lon, lat

    def unproject_point(self, lon: float, lat: float) -> tuple[float, float]:
        """Target (lon, lat) → source (x, y)."""
        x, y = self._inverse.transform(lon, lat)
        return x, y

    # ── Coordinate trees ──────────────────────────────────────

    def convert_coordinates(self, coordinates: Any) -> list[Any]:
        """
        Reproject every position in a GeoJSON ``coordinates`` value.

        Works for any nesting depth; the returned lists have the same
        length as the input at every level.
        """
        tree = parse_coordinates(coordinates)
        return tree.map(self.project_point).to_list()

    # ── GeoJSON objects ───────────────────────────────────────

    def convert_geometry(
        self, geometry: Mapping[str, Any] | None, where: str = "geometry"
    ) -> dict[str, Any]:
        if not isinstance(geometry, Mapping):
            raise MissingGeometryError(where)

        if geometry.get("type") == "GeometryCollection":
            members = geometry.get("geometries")
            if members is None:
                raise MissingGeometryError(f"{where}.geometries")
            return {
                **geometry,
                "geometries": [
                    self.convert_geometry(member, f"{where}.geometries[{i}]")
                    for i, member in enumerate(members)
                ],
            }

        if geometry.get("coordinates") is None:
            raise MissingGeometryError(f"{where}.coordinates")
        return {
            **geometry,
            "coordinates": self.convert_coordinates(geometry["coordinates"]),
        }

    def convert_feature(
        self, feature: Mapping[str, Any], where: str = "feature"
    ) -> dict[str, Any]:
        """Rewrite ``geometry`` only; ``properties`` is passed through as is."""
        return {
            **feature,
            "geometry": self.convert_geometry(
                feature.get("geometry"), f"{where}.geometry"
            ),
        }

    def convert_geojson(self, geojson: Mapping[str, Any]) -> dict[str, Any]:
        """
        Reproject a ``FeatureCollection``, a ``Feature`` or a bare geometry.

        Raises
        ------
        MissingGeometryError
            If a collection has no features, a feature has no geometry, or a
            geometry has no coordinates.
        MalformedCoordinatesError
            If a coordinate tree is not made of ``[x, y]`` positions.
        """
        kind = geojson.get("type")

        if kind == "FeatureCollection":
            features = geojson.get("features")
            if features is None:
                raise MissingGeometryError("features")
            logger.debug("Reprojecting %d features", len(features))
            return {
                **geojson,
                "features": [
                    self.convert_feature(feature, f"features[{i}]")
                    for i, feature in enumerate(features)
                ],
            }
        elif kind == "Feature":
            return self.convert_feature(geojson)
        else:
            return self.convert_geometry(geojson)

    def describe(self) -> dict[str, Any]:
        """The CRS pair as configured, with PROJ's names for each."""
        return {
            "source": self.source_crs.srs,
            "source_name": self.source_crs.name,
            "target": self.target_crs.srs,
            "target_name": self.target_crs.name,
        }

