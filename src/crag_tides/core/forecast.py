"""Forecast orchestration: config -> cache -> provider -> window math -> cache."""
from __future__ import annotations

import logging
import re
import time
from typing import Any, Optional

from pydantic import ValidationError

from crag_tides.cache import keys
from crag_tides.cache.store import CacheStore
from crag_tides.config import Settings, settings as default_settings
from crag_tides.core.models import ForecastResult, TidalConfig, WindowOut, iso_utc
from crag_tides.core.windows import (
    apply_window_buffer,
    compute_raw_access_windows,
    interpolate_height,
    is_accessible,
    pick_next_window,
)
from crag_tides.errors import (
    CacheDeserializationError,
    CacheUnavailableError,
    ConfigurationError,
    InsufficientDataError,
    NotFoundError,
)
from crag_tides.locations import LocationStore, TidalConfigUpdate, validate_config_update
from crag_tides.providers.base import TideProvider

log = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def clamp_forecast_hours(raw: Any, cfg: Settings = default_settings) -> int:
    """Parse an hours value leniently and clamp it to the allowed horizon.

    Strings contribute their leading integer (``"48.5"`` and ``"48h"`` are 48);
    anything without one falls back to the default.
    """
    if raw is None:
        hours = cfg.forecast_hours_default
    elif isinstance(raw, int):
        hours = raw
    else:
        m = _LEADING_INT.match(str(raw))
        hours = int(m.group(1)) if m else cfg.forecast_hours_default
    return min(cfg.forecast_hours_max, max(cfg.forecast_hours_min, hours))


def _require_tidal_fields(config: TidalConfig) -> None:
    if not config.has_gps:
        raise ConfigurationError("Tidal locations must include GPS coordinates")
    if config.threshold_m is None:
        raise ConfigurationError("Tidal max height is missing for this location")


class ForecastOrchestrator:
    """Serves a location's tidal status, caching results per location.

    Concurrent misses for one location may both fetch and both write; the
    last write wins and both hold the same result.
    """

    def __init__(
        self,
        locations: LocationStore,
        provider: TideProvider,
        cache: CacheStore,
        cfg: Settings = default_settings,
    ) -> None:
        self.locations = locations
        self.provider = provider
        self.cache = cache
        self.cfg = cfg

    # ---------- Cache ----------

    @staticmethod
    def _decode(raw: str) -> ForecastResult:
        try:
            return ForecastResult.model_validate_json(raw)
        except ValidationError as e:
            raise CacheDeserializationError(f"{e.error_count()} validation error(s)") from e

    def _read_cached(self, key: str) -> Optional[ForecastResult]:
        raw = self.cache.get_text(key)
        if raw is None:
            log.debug("Cache miss: %s", key)
            return None
        try:
            return self._decode(raw)
        except CacheDeserializationError as e:
            log.warning("Dropping corrupt cache entry %s: %s", key, e.message)
            try:
                self.cache.delete(key)
            except CacheUnavailableError as exc:
                # overwritten by the fresh result on this miss
                log.warning("Could not drop corrupt cache entry %s: %s", key, exc.message)
            return None

    def invalidate(self, location_id: str) -> None:
        """Drop the cached forecast for *location_id*, whether or not one exists."""
        self.cache.delete(keys.tides_location(location_id))
        log.info("Invalidated tide forecast cache for location %s", location_id)

    # ---------- Status ----------

    def _load(self, location_id: str) -> TidalConfig:
        config = self.locations.get(location_id)
        if config is None:
            raise NotFoundError(f"Location {location_id} not found")
        return config

    def get_status(
        self,
        location_id: str,
        now_s: Optional[int] = None,
        forecast_hours: Optional[int] = None,
    ) -> ForecastResult:
        config = self._load(location_id)
        if not config.is_tidal:
            return ForecastResult(tidal=False, location_id=location_id)

        _require_tidal_fields(config)

        key = keys.tides_location(location_id)
        cached = self._read_cached(key)
        if cached is not None:
            log.debug("Cache hit: %s", key)
            return cached

        if now_s is None:
            now_s = int(time.time())
        hours = clamp_forecast_hours(forecast_hours, self.cfg)

        forecast = self.provider.get_heights(
            lat=config.latitude,
            lon=config.longitude,
            start_s=now_s - self.cfg.forecast_lookback_s,
            length_s=hours * 3600 + self.cfg.forecast_padding_s,
            step_s=self.cfg.forecast_step_s,
        )
        if len(forecast.points) < 2:
            raise InsufficientDataError("No usable tide data returned from provider")

        threshold = config.threshold_m
        raw_windows = compute_raw_access_windows(forecast.points, threshold)
        windows = apply_window_buffer(raw_windows, config.buffer_min)
        next_window = pick_next_window(windows, now_s)

        result = ForecastResult(
            tidal=True,
            location_id=location_id,
            threshold_m=threshold,
            buffer_min=config.buffer_min,
            current_height_m=interpolate_height(forecast.points, now_s),
            accessible_now=is_accessible(windows, now_s),
            next_window=WindowOut.from_window(next_window) if next_window else None,
            station=forecast.station,
            timezone=forecast.timezone,
            datum=forecast.datum,
            copyright=forecast.copyright,
            notes=config.notes,
            generated_at=iso_utc(time.time()),
        )
        log.debug(
            "Location %s: %d raw / %d buffered windows, accessible_now=%s",
            location_id, len(raw_windows), len(windows), result.accessible_now,
        )

        self.cache.set_text(key, result.model_dump_json(), ttl=self.cfg.ttl_tides)
        return result

    # ---------- Admin ----------

    def update_config(self, location_id: str, update: TidalConfigUpdate) -> TidalConfig:
        """Validate and persist a tidal configuration change, then invalidate the
        location's cached forecast before returning."""
        existing = self._load(location_id)
        merged = validate_config_update(existing, update)
        stored = self.locations.update(location_id, merged)
        self.invalidate(location_id)
        return stored
