"""Exceptions raised while normalising or reprojecting GeoJSON."""

from __future__ import annotations


class GeoJSONError(ValueError):
    """Base class for GeoJSON shape problems the core refuses to guess about."""


class MissingGeometryError(GeoJSONError):
    """A Feature (or bare geometry) has nothing to reproject."""

    def __init__(self, where: str = "geometry") -> None:
        super().__init__(f"missing geometry: {where}")
        self.where = where


class MalformedCoordinatesError(GeoJSONError):
    """A coordinate tree node is neither a position nor a list of nodes."""

    def __init__(self, node: object, path: tuple[int, ...] = ()) -> None:
        location = "/".join(str(i) for i in path) or "<root>"
        super().__init__(f"malformed coordinates at {location}: {node!r}")
        self.node = node
        self.path = path
