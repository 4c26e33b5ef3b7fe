"""
Tests for app.services.parcels and app.services.popup — batch conversion
with per-record failure isolation, bounds and popup content.
"""
from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from app.schemas.geojson import ParcelConversionResponse
from app.services.parcels import (
    BatchResult,
    ParcelConversionService,
    get_parcel_service,
)
from app.services.popup import popup_entries, popup_html
from app.spatial.errors import MalformedCoordinatesError, MissingGeometryError
from tests.conftest import (
    DOWNTOWN_FT,
    DOWNTOWN_LONLAT,
    LONLAT_TOL,
    MID_CITY_FT,
    MID_CITY_LONLAT,
    make_parcel_record,
    make_polygon,
    square_ring,
)


# ═══════════════════════════════════════════════════════════════════
# convert_record
# ═══════════════════════════════════════════════════════════════════
class TestConvertRecord:

    def test_polygon_record(self, service, reprojector):
        ring = square_ring()
        record = make_parcel_record(geometry={"type": "Polygon", "coordinates": [ring]})
        feature = service.convert_record(record)

        assert feature["type"] == "Feature"
        assert feature["properties"] == {"parcelId": "123", "area": 500}
        assert feature["geometry"]["type"] == "Polygon"

        out_ring = feature["geometry"]["coordinates"][0]
        assert len(out_ring) == len(ring)
        for src, dst in zip(ring, out_ring):
            assert dst == list(reprojector.project_point(*src))
        assert out_ring[0] == out_ring[-1]

    def test_first_vertex_downtown(self, service):
        feature = service.convert_record(make_parcel_record())
        lon, lat = feature["geometry"]["coordinates"][0][0]
        assert lon == pytest.approx(DOWNTOWN_LONLAT[0], abs=LONLAT_TOL)
        assert lat == pytest.approx(DOWNTOWN_LONLAT[1], abs=LONLAT_TOL)

    def test_record_untouched(self, service):
        record = make_parcel_record()
        service.convert_record(record)
        assert record["geometry"]["coordinates"][0][0] == list(DOWNTOWN_FT)

    def test_missing_geometry(self, service):
        with pytest.raises(MissingGeometryError):
            service.convert_record(make_parcel_record(with_geometry=False))


# ═══════════════════════════════════════════════════════════════════
# convert_batch
# ═══════════════════════════════════════════════════════════════════
class TestConvertBatch:

    def test_all_good(self, service):
        records = [make_parcel_record(parcel_id=str(i)) for i in range(3)]
        result = service.convert_batch(records)
        assert isinstance(result, BatchResult)
        assert [f["properties"]["parcelId"] for f in result.features] == ["0", "1", "2"]
        assert result.errors == []

    def test_bad_records_skipped_and_reported(self, service, caplog):
        records = [
            make_parcel_record(parcel_id="a"),
            make_parcel_record(parcel_id="b", with_geometry=False),
            make_parcel_record(parcel_id="c", geometry={
                "type": "Polygon", "coordinates": [[[1.0, 2.0, 3.0]]],
            }),
            make_parcel_record(parcel_id="d"),
        ]
        with caplog.at_level(logging.WARNING, logger="app.services.parcels"):
            result = service.convert_batch(records)

        assert [f["properties"]["parcelId"] for f in result.features] == ["a", "d"]
        assert [(e.index, e.error) for e in result.errors] == [
            (1, "MissingGeometryError"),
            (2, "MalformedCoordinatesError"),
        ]
        assert "Skipping parcel record 1" in caplog.text

    def test_strict_raises(self, strict_service):
        records = [make_parcel_record(), make_parcel_record(with_geometry=False)]
        with pytest.raises(MissingGeometryError):
            strict_service.convert_batch(records)

    def test_strict_malformed(self, strict_service):
        records = [make_parcel_record(geometry={"type": "Point", "coordinates": [1]})]
        with pytest.raises(MalformedCoordinatesError):
            strict_service.convert_batch(records)

    def test_empty_batch(self, service):
        result = service.convert_batch([])
        assert result.features == []
        assert result.bounds is None

    def test_feature_collection(self, service):
        result = service.convert_batch([make_parcel_record()])
        fc = result.to_feature_collection()
        assert fc["type"] == "FeatureCollection"
        assert fc["features"] is result.features

    def test_bounds_frame_all_parcels(self, service):
        records = [
            make_parcel_record(geometry=make_polygon()),
            make_parcel_record(geometry=make_polygon(x=6442000.0, y=1848000.0)),
        ]
        result = service.convert_batch(records)
        b = result.bounds
        for feature in result.features:
            for lon, lat in feature["geometry"]["coordinates"][0]:
                assert b.min_x <= lon <= b.max_x
                assert b.min_y <= lat <= b.max_y
        assert b.min_x < -118.39
        assert b.max_x > -118.25


# ═══════════════════════════════════════════════════════════════════
# convert_batch_response
# ═══════════════════════════════════════════════════════════════════
class TestConvertBatchResponse:

    @pytest.mark.parametrize("geometry", [
        {"coordinates": list(MID_CITY_FT)},
        {"type": "LineString", "coordinates": [list(MID_CITY_FT)]},
        {"type": "Polygon", "coordinates": [[]]},
    ])
    def test_tag_agnostic_geometries_framed(self, service, geometry):
        records = [make_parcel_record(), make_parcel_record(geometry=geometry)]
        resp = service.convert_batch_response(records)
        assert resp.converted == 2
        assert resp.skipped == 0
        assert resp.bounds is not None
        if geometry["coordinates"] != [[]]:
            assert resp.bounds.min_x == pytest.approx(MID_CITY_LONLAT[0], abs=LONLAT_TOL)
        assert resp.bounds.max_x > DOWNTOWN_LONLAT[0]

    def test_response_shape(self, service):
        records = [make_parcel_record(), make_parcel_record(with_geometry=False)]
        resp = service.convert_batch_response(records)
        assert isinstance(resp, ParcelConversionResponse)
        assert resp.converted == 1
        assert resp.skipped == 1
        assert resp.errors[0].index == 1
        assert resp.collection.features[0].properties == {"parcelId": "123", "area": 500}
        assert resp.bounds is not None
        south_west, north_east = resp.bounds.leaflet
        assert south_west[0] == pytest.approx(resp.bounds.min_y)
        assert north_east[1] == pytest.approx(resp.bounds.max_x)

    def test_no_bounds_when_nothing_converted(self, service):
        resp = service.convert_batch_response([make_parcel_record(with_geometry=False)])
        assert resp.converted == 0
        assert resp.bounds is None


# ═══════════════════════════════════════════════════════════════════
# Popups
# ═══════════════════════════════════════════════════════════════════
class TestPopup:

    def test_entries_in_order(self):
        feature = {"properties": {"parcelId": "123", "area": 500}}
        assert popup_entries(feature) == [("parcelId", "123"), ("area", 500)]

    def test_entries_no_properties(self):
        assert popup_entries({"properties": None}) == []
        assert popup_entries({}) == []

    def test_html(self):
        feature = {"properties": {"parcelId": "123", "area": 500}}
        assert popup_html(feature) == "parcelId: 123<br>area: 500<br>"

    def test_html_escapes(self):
        feature = {"properties": {"owner": "<b>Smith & Co</b>"}}
        assert popup_html(feature) == "owner: &lt;b&gt;Smith &amp; Co&lt;/b&gt;<br>"

    def test_custom_separator(self):
        feature = {"properties": {"a": 1, "b": 2}}
        assert popup_html(feature, separator="\n") == "a: 1\nb: 2\n"

    def test_service_popup(self, reprojector):
        svc = ParcelConversionService(reprojector, popup_separator="|")
        resp = svc.popup({"properties": {"parcelId": "9"}})
        assert resp.entries[0].key == "parcelId"
        assert resp.entries[0].value == "9"
        assert resp.html == "parcelId: 9|"


# ═══════════════════════════════════════════════════════════════════
# get_parcel_service
# ═══════════════════════════════════════════════════════════════════
class TestGetParcelService:

    def test_cached(self):
        get_parcel_service.cache_clear()
        assert get_parcel_service() is get_parcel_service()

    def test_uses_settings(self):
        from app.config import Settings

        get_parcel_service.cache_clear()
        settings = Settings(_env_file=None, strict_batches=True, popup_separator="\n")
        with patch("app.services.parcels.get_settings", return_value=settings):
            svc = get_parcel_service()
        get_parcel_service.cache_clear()

        assert svc.strict is True
        assert svc.popup_separator == "\n"
