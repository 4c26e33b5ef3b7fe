"""
Parcelmap — Configuration via pydantic-settings.

Environment variables override defaults.  The source CRS definition is the
bridge between the state-plane feet the parcel records are stored in and the
WGS84 longitude/latitude the map frontend expects.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict

# NAD83 / California zone V (ftUS), EPSG:2229.
EPSG_2229 = (
    "+proj=lcc +lat_1=35.46666666666667 +lat_2=34.03333333333333 "
    "+lat_0=33.5 +lon_0=-118 +x_0=2000000.0001016 +y_0=500000.0001016001 "
    "+ellps=GRS80 +datum=NAD83 +to_meter=0.3048006096012192 +no_defs"
)
WGS84 = "WGS84"


class Settings(BaseSettings):
    env_path: ClassVar[str] = str(Path(__file__).resolve().parents[2] / ".env")
    model_config = SettingsConfigDict(
        env_file=env_path,
        env_file_encoding="utf-8",
        env_prefix="PARCELMAP_",
        # Ignore unrelated environment variables so loading the env_file
        # does not cause validation errors for unknown keys.
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────
    app_name: str = "Parcelmap"
    debug: bool = False

    # ── Projection ─────────────────────────────────────────────────
    # PROJ-style definition of the CRS the parcel records arrive in.
    source_crs: str = EPSG_2229
    # Anything pyproj.CRS.from_user_input accepts.
    target_crs: str = WGS84

    # ── Batch conversion ───────────────────────────────────────────
    # When true, the first bad record aborts the whole batch instead of
    # being skipped and reported.
    strict_batches: bool = False

    # ── Popups ─────────────────────────────────────────────────────
    popup_separator: str = "<br>"

    # ── CORS ───────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
