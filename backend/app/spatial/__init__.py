"""Spatial subpackage — coordinate trees and CRS reprojection."""

from app.spatial.errors import (
    GeoJSONError,
    MalformedCoordinatesError,
    MissingGeometryError,
)
from app.spatial.reproject import Bounds, Reprojector
from app.spatial.tree import (
    CoordinateBranch,
    CoordinateLeaf,
    CoordinateTree,
    parse_coordinates,
)

__all__ = [
    "Bounds",
    "CoordinateBranch",
    "CoordinateLeaf",
    "CoordinateTree",
    "GeoJSONError",
    "MalformedCoordinatesError",
    "MissingGeometryError",
    "Reprojector",
    "parse_coordinates",
]
