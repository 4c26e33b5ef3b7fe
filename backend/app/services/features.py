"""
Feature Adapter
===============
Parcel records arrive flat: every attribute at the top level, with the
boundary stored under a single ``geometry`` key.  GeoJSON wants the
attributes under ``properties``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

GEOMETRY_KEY = "geometry"


def record_to_feature(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Wrap a flat record as a GeoJSON Feature.

    ``properties`` is the record minus ``geometry``, in the record's key
    order.  ``geometry`` is passed through untouched, or ``None`` if the
    record has none.
    """
    properties = {k: v for k, v in record.items() if k != GEOMETRY_KEY}
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": record.get(GEOMETRY_KEY),
    }


def records_to_features(records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [record_to_feature(record) for record in records]
