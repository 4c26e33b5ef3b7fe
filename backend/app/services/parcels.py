"""
Parcel Conversion Service
=========================
Runs the record → Feature → reprojected Feature pipeline over a batch of
parcel records as decoded from the upstream ``/property`` endpoint.

Failure model
-------------
Each record is converted on its own.  A record whose geometry is missing or
malformed is logged, reported back with its index, and left out of the
collection; the records around it are unaffected.  With ``strict=True`` the
first failure propagates instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from pyproj.exceptions import ProjError

from app.config import get_settings
from app.schemas.geojson import (
    BoundsOut,
    ConversionError,
    FeatureCollection,
    ParcelConversionResponse,
    PopupEntry,
    PopupResponse,
)
from app.services.features import record_to_feature
from app.services.popup import popup_entries, popup_html
from app.spatial.errors import GeoJSONError
from app.spatial.reproject import Bounds, Reprojector

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    features: list[dict[str, Any]] = field(default_factory=list)
    errors: list[ConversionError] = field(default_factory=list)

    @property
    def bounds(self) -> Bounds | None:
        return Bounds.of_features(self.features)

    def to_feature_collection(self) -> dict[str, Any]:
        return {"type": "FeatureCollection", "features": self.features}


class ParcelConversionService:
    """
    Converts flat parcel records into WGS84 GeoJSON Features.

    Parameters
    ----------
    reprojector : Reprojector
        Source → target CRS transform applied to every position.
    strict : bool
        Abort the batch on the first bad record instead of skipping it.
    popup_separator : str
        Line separator used by ``popup()``.
    """

    def __init__(
        self,
        reprojector: Reprojector,
        *,
        strict: bool = False,
        popup_separator: str = "<br>",
    ) -> None:
        self.reprojector = reprojector
        self.strict = strict
        self.popup_separator = popup_separator

    # ── Single record ─────────────────────────────────────────

    def convert_record(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Adapt *record* to a Feature and reproject its geometry."""
        return self.reprojector.convert_feature(record_to_feature(record))

    # ── Batch ─────────────────────────────────────────────────

    def convert_batch(self, records: Iterable[Mapping[str, Any]]) -> BatchResult:
        """
        Convert *records* in order.

        Returns
        -------
        BatchResult
            Converted features in input order, plus one ``ConversionError``
            per skipped record.
        """
        result = BatchResult()
        for index, record in enumerate(records):
            try:
                result.features.append(self.convert_record(record))
            except (GeoJSONError, ProjError) as exc:
                if self.strict:
                    raise
                logger.warning("Skipping parcel record %d: %s", index, exc)
                result.errors.append(
                    ConversionError(
                        index=index,
                        error=type(exc).__name__,
                        message=str(exc),
                    )
                )

        logger.info(
            "Converted %d parcel records (%d skipped)",
            len(result.features),
            len(result.errors),
        )
        return result

    def convert_batch_response(
        self, records: Iterable[Mapping[str, Any]]
    ) -> ParcelConversionResponse:
        result = self.convert_batch(records)
        bounds = result.bounds
        return ParcelConversionResponse(
            collection=FeatureCollection.model_validate(
                result.to_feature_collection()
            ),
            converted=len(result.features),
            skipped=len(result.errors),
            errors=result.errors,
            bounds=(
                BoundsOut(
                    min_x=bounds.min_x,
                    min_y=bounds.min_y,
                    max_x=bounds.max_x,
                    max_y=bounds.max_y,
                    leaflet=bounds.to_leaflet(),
                )
                if bounds is not None
                else None
            ),
        )

    # ── Popups ────────────────────────────────────────────────

    def popup(self, feature: Mapping[str, Any]) -> PopupResponse:
        return PopupResponse(
            entries=[
                PopupEntry(key=str(key), value=value)
                for key, value in popup_entries(feature)
            ],
            html=popup_html(feature, self.popup_separator),
        )


@lru_cache(maxsize=1)
def get_parcel_service() -> ParcelConversionService:
    """
    Return the process-wide service.

    Building a ``pyproj.Transformer`` is comparatively expensive, so the
    service (and its reprojector) is built once.
    """
    settings = get_settings()
    return ParcelConversionService(
        Reprojector.from_settings(settings),
        strict=settings.strict_batches,
        popup_separator=settings.popup_separator,
    )
