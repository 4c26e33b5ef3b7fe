"""
Typed coordinate trees
======================
GeoJSON nests positions at a depth that depends on the geometry type:

    Point            [x, y]                      depth 0
    LineString       [[x, y], ...]               depth 1
    Polygon          [[[x, y], ...], ...]        depth 2
    MultiPolygon     [[[[x, y], ...], ...], ...] depth 3

Rather than asking "is the first element a number?" at every step of every
rewrite, the raw JSON is parsed once into ``CoordinateLeaf`` /
``CoordinateBranch`` nodes.  Everything downstream works on the typed tree
and never has to guess.

An empty list parses to an empty ``CoordinateBranch``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from app.spatial.errors import MalformedCoordinatesError

PointFn = Callable[[float, float], tuple[float, float]]


def _is_number(value: Any) -> bool:
    # JSON true/false decode to bool, which is an int subclass.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class CoordinateLeaf:
    """A single position ``[x, y]``."""

    x: float
    y: float

    def map(self, fn: PointFn) -> CoordinateLeaf:
        x, y = fn(self.x, self.y)
        return CoordinateLeaf(x, y)

    def positions(self) -> Iterator[tuple[float, float]]:
        yield self.x, self.y

    def to_list(self) -> list[float]:
        return [self.x, self.y]


@dataclass(frozen=True, slots=True)
class CoordinateBranch:
    """An ordered sequence of sub-trees (a ring, a polygon, ...)."""

    children: tuple[CoordinateTree, ...] = ()

    def map(self, fn: PointFn) -> CoordinateBranch:
        """Apply *fn* to every leaf, keeping order and length at each level."""
        return CoordinateBranch(tuple(child.map(fn) for child in self.children))

    def positions(self) -> Iterator[tuple[float, float]]:
        for child in self.children:
            yield from child.positions()

    def to_list(self) -> list[Any]:
        return [child.to_list() for child in self.children]


CoordinateTree = CoordinateLeaf | CoordinateBranch


def parse_coordinates(
    node: Any, _path: tuple[int, ...] = ()
) -> CoordinateTree:
    """
    Build a typed tree from a decoded GeoJSON ``coordinates`` value.

    Raises
    ------
    MalformedCoordinatesError
        If a node is not a sequence, or a position is not exactly two
        numbers.
    """
    if isinstance(node, (str, bytes)) or not isinstance(node, Sequence):
        raise MalformedCoordinatesError(node, _path)

    if node and _is_number(node[0]):
        if len(node) != 2 or not _is_number(node[1]):
            raise MalformedCoordinatesError(node, _path)
        return CoordinateLeaf(node[0], node[1])

    return CoordinateBranch(
        tuple(
            parse_coordinates(child, _path + (i,))
            for i, child in enumerate(node)
        )
    )
