"""
Parcelmap — FastAPI Application
===============================
Converts state-plane parcel records into WGS84 GeoJSON for the map
frontend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import geojson, parcels

logger = logging.getLogger(__name__)
settings = get_settings()


# ── Lifespan (startup / shutdown) ─────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
        - Build the shared conversion service so a bad CRS definition
          fails the boot rather than the first request.
    """
    logger.info("%s starting up...", settings.app_name)

    from app.services.parcels import get_parcel_service
    service = get_parcel_service()
    crs = service.reprojector.describe()
    logger.info(
        "Reprojecting %s -> %s", crs["source_name"], crs["target_name"]
    )

    yield

    logger.info("%s shut down.", settings.app_name)


# ── App factory ───────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Reprojects parcel boundaries from a state-plane CRS to WGS84 "
            "GeoJSON for web map display."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the map frontend (configurable via PARCELMAP_CORS_ORIGINS).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(parcels.router, prefix="/api")
    app.include_router(geojson.router, prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": settings.app_name}

    return app


# ── Module-level app instance (for `uvicorn app.main:app`) ───────
app = create_app()  # pragma: no cover
