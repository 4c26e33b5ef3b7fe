"""Popup content for a clicked parcel: one ``key: value`` line per property."""

from __future__ import annotations

from collections.abc import Mapping
from html import escape
from typing import Any


def popup_entries(feature: Mapping[str, Any]) -> list[tuple[str, Any]]:
    properties = feature.get("properties") or {}
    return list(properties.items())


def popup_html(feature: Mapping[str, Any], separator: str = "<br>") -> str:
    """
    Render the properties as ``key: value<br>`` lines.

    Keys and values are HTML-escaped; the separator is not.
    """
    return "".join(
        f"{escape(str(key))}: {escape(str(value))}{separator}"
        for key, value in popup_entries(feature)
    )
