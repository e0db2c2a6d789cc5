"""Configuration helpers for the yardage service."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from yardage.constants import (
    AUTO_HIDE_WITHIN_GREEN,
    AUTO_HIDE_WITHIN_TARGET,
    DEFAULT_RENDER_HEIGHT_PX,
    DEFAULT_RENDER_WIDTH_PX,
    MAX_LATERAL_OFFSET,
    SMOOTHING_DURATION_MS,
    TARGET_ENDPOINT_GUARD_PX,
)
from yardage.session import SessionOptions

DEFAULT_MAX_OPEN_VISITS = 256
DEFAULT_VISIT_TTL_SECONDS = 4 * 3600.0


class _Settings(BaseSettings):
    calibrations_dir: str = Field(default="data/calibrations", alias="YARDAGE_CALIBRATIONS_DIR")
    unit: Literal["yd", "m"] = Field(default="yd", alias="YARDAGE_UNIT")
    max_lateral: float = Field(default=MAX_LATERAL_OFFSET, ge=0, alias="YARDAGE_MAX_LATERAL")
    near_green: float = Field(default=AUTO_HIDE_WITHIN_GREEN, ge=0, alias="YARDAGE_NEAR_GREEN")
    near_target: float = Field(default=AUTO_HIDE_WITHIN_TARGET, ge=0, alias="YARDAGE_NEAR_TARGET")
    smoothing_ms: float = Field(default=SMOOTHING_DURATION_MS, gt=0, alias="YARDAGE_SMOOTHING_MS")
    render_width: float = Field(default=DEFAULT_RENDER_WIDTH_PX, gt=0, alias="YARDAGE_RENDER_WIDTH")
    render_height: float = Field(default=DEFAULT_RENDER_HEIGHT_PX, gt=0, alias="YARDAGE_RENDER_HEIGHT")
    target_guard_px: float = Field(default=TARGET_ENDPOINT_GUARD_PX, ge=0, alias="YARDAGE_TARGET_GUARD_PX")
    max_open_visits: int = Field(default=DEFAULT_MAX_OPEN_VISITS, ge=1, alias="YARDAGE_MAX_OPEN_VISITS")
    visit_ttl_seconds: float = Field(
        default=DEFAULT_VISIT_TTL_SECONDS, gt=0, alias="YARDAGE_VISIT_TTL_SECONDS"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def session_options(settings: _Settings | None = None) -> SessionOptions:
    settings = settings or get_settings()
    return SessionOptions(
        unit=settings.unit,
        max_lateral=settings.max_lateral,
        near_green=settings.near_green,
        near_target=settings.near_target,
        smoothing_ms=settings.smoothing_ms,
        render_size=(settings.render_width, settings.render_height),
        guard_px=settings.target_guard_px,
    )

