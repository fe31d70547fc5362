"""Per-location tidal configuration: storage and write-boundary validation."""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from crag_tides.core.models import TidalConfig
from crag_tides.db import get_supabase
from crag_tides.errors import ConfigurationError, NotFoundError, StoreUnavailableError

_TABLE = "images"
_COLUMNS = "id, latitude, longitude, is_tidal, tidal_max_height_m, tidal_buffer_min, tidal_notes"


class TidalConfigUpdate(BaseModel):
    """Partial update; fields left unset keep their stored value."""

    is_tidal: Optional[bool] = None
    tidal_max_height_m: Optional[float] = None
    tidal_buffer_min: Optional[int] = None
    tidal_notes: Optional[str] = None


def validate_config_update(existing: TidalConfig, update: TidalConfigUpdate) -> TidalConfig:
    """Merge *update* onto *existing* and enforce the tidal invariants.

    Raises ``ConfigurationError`` without side effects when the result would be
    invalid.  Disabling tidal mode clears the threshold.
    """
    given = update.model_fields_set

    if "tidal_max_height_m" in given and update.tidal_max_height_m is not None:
        if not math.isfinite(update.tidal_max_height_m):
            raise ConfigurationError("tidal_max_height_m must be a valid number in meters")

    if "tidal_buffer_min" in given:
        if update.tidal_buffer_min is None or update.tidal_buffer_min < 0:
            raise ConfigurationError("tidal_buffer_min must be a non-negative integer")

    is_tidal = update.is_tidal if update.is_tidal is not None else existing.is_tidal
    threshold = update.tidal_max_height_m if "tidal_max_height_m" in given else existing.threshold_m
    buffer_min = update.tidal_buffer_min if "tidal_buffer_min" in given else existing.buffer_min
    notes = update.tidal_notes if "tidal_notes" in given else existing.notes

    if is_tidal:
        if not existing.has_gps:
            raise ConfigurationError("Cannot enable tidal access for locations without GPS coordinates")
        if threshold is None or not math.isfinite(threshold):
            raise ConfigurationError("tidal_max_height_m is required when is_tidal is true")

    return TidalConfig(
        is_tidal=is_tidal,
        threshold_m=threshold if is_tidal else None,
        buffer_min=buffer_min or 0,
        latitude=existing.latitude,
        longitude=existing.longitude,
        notes=notes,
    )


def config_from_row(row: Dict[str, Any]) -> TidalConfig:
    threshold = row.get("tidal_max_height_m")
    return TidalConfig(
        is_tidal=bool(row.get("is_tidal")),
        threshold_m=float(threshold) if threshold is not None else None,
        buffer_min=max(0, int(row.get("tidal_buffer_min") or 0)),
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
        notes=row.get("tidal_notes") or None,
    )


class LocationStore(ABC):
    @abstractmethod
    def get(self, location_id: str) -> Optional[TidalConfig]:
        raise NotImplementedError

    @abstractmethod
    def update(self, location_id: str, config: TidalConfig) -> TidalConfig:
        raise NotImplementedError


class SupabaseLocationStore(LocationStore):
    """Reads/writes the tidal columns of the ``images`` table."""

    def __init__(self, client_factory: Callable = get_supabase) -> None:
        self._client_factory = client_factory

    def _client(self):
        sb = self._client_factory()
        if sb is None:
            raise StoreUnavailableError("Database unavailable")
        return sb

    def get(self, location_id: str) -> Optional[TidalConfig]:
        resp = (
            self._client()
            .table(_TABLE)
            .select(_COLUMNS)
            .eq("id", location_id)
            .limit(1)
            .execute()
        )
        if not resp.data:
            return None
        return config_from_row(resp.data[0])

    def update(self, location_id: str, config: TidalConfig) -> TidalConfig:
        row = {
            "is_tidal": config.is_tidal,
            "tidal_max_height_m": config.threshold_m,
            "tidal_buffer_min": config.buffer_min,
            "tidal_notes": config.notes,
        }
        resp = (
            self._client()
            .table(_TABLE)
            .update(row)
            .eq("id", location_id)
            .execute()
        )
        if not resp.data:
            raise NotFoundError(f"Location {location_id} not found")
        return config_from_row(resp.data[0])


class MemoryLocationStore(LocationStore):
    def __init__(self, configs: Optional[Dict[str, TidalConfig]] = None) -> None:
        self._configs: Dict[str, TidalConfig] = dict(configs or {})

    def get(self, location_id: str) -> Optional[TidalConfig]:
        return self._configs.get(location_id)

    def update(self, location_id: str, config: TidalConfig) -> TidalConfig:
        if location_id not in self._configs:
            raise NotFoundError(f"Location {location_id} not found")
        self._configs[location_id] = config
        return config
