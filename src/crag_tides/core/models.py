from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, Field

Seconds = Union[int, float]


def iso_utc(epoch_s: Seconds) -> str:
    """Epoch seconds -> ISO-8601 UTC string with millisecond precision."""
    dt = datetime.fromtimestamp(round(epoch_s, 3), tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TidePoint:
    """One forecast sample: epoch seconds (UTC) and height in meters."""

    timestamp_s: Seconds
    height_m: float


@dataclass(frozen=True)
class TideWindow:
    """Half-open access interval.  Crossing bounds may be fractional seconds."""

    start_s: Seconds
    end_s: Seconds

    @property
    def duration_s(self) -> float:
        return self.end_s - self.start_s


@dataclass(frozen=True)
class TideForecast:
    """Provider response: samples plus whatever metadata the provider reports."""

    points: List[TidePoint]
    station: Optional[str] = None
    timezone: Optional[str] = None
    datum: Optional[str] = None
    copyright: Optional[str] = None


class TidalConfig(BaseModel):
    is_tidal: bool = False
    threshold_m: Optional[float] = None
    buffer_min: int = Field(default=0, ge=0)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    notes: Optional[str] = None

    @property
    def has_gps(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class WindowOut(BaseModel):
    start: str
    end: str

    @classmethod
    def from_window(cls, window: TideWindow) -> "WindowOut":
        return cls(start=iso_utc(window.start_s), end=iso_utc(window.end_s))


class ForecastResult(BaseModel):
    tidal: bool
    location_id: str

    threshold_m: Optional[float] = None
    buffer_min: Optional[int] = None
    current_height_m: Optional[float] = None
    accessible_now: bool = False
    next_window: Optional[WindowOut] = None

    # provider metadata, when reported
    station: Optional[str] = None
    timezone: Optional[str] = None
    datum: Optional[str] = None
    copyright: Optional[str] = None

    notes: Optional[str] = None
    generated_at: Optional[str] = None
