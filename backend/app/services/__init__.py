"""Services subpackage — record adaptation and batch conversion."""

from app.services.features import record_to_feature, records_to_features
from app.services.parcels import (
    BatchResult,
    ParcelConversionService,
    get_parcel_service,
)
from app.services.popup import popup_entries, popup_html

__all__ = [
    "BatchResult",
    "ParcelConversionService",
    "get_parcel_service",
    "popup_entries",
    "popup_html",
    "record_to_feature",
    "records_to_features",
]
