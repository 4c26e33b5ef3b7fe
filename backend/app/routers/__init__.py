"""Routers subpackage — HTTP layer for all API endpoints."""

from app.routers import geojson, parcels

__all__ = ["geojson", "parcels"]
