from __future__ import annotations

import math
from typing import List, Optional

from crag_tides.core.models import TideForecast, TidePoint
from crag_tides.providers.base import TideProvider

# principal lunar semidiurnal period
_M2_PERIOD_S = 12.42 * 3600


class MockTideProvider(TideProvider):
    """
    Deterministic fake data so the pipeline runs end-to-end without APIs.

    Either replays a fixed list of samples or synthesizes a sinusoidal
    semidiurnal tide.  ``calls`` counts requests so tests can assert caching.
    """

    def __init__(
        self,
        points: Optional[List[TidePoint]] = None,
        mean_m: float = 2.0,
        amplitude_m: float = 1.5,
        station: Optional[str] = "Mock Harbour",
    ) -> None:
        self.points = points
        self.mean_m = mean_m
        self.amplitude_m = amplitude_m
        self.station = station
        self.calls = 0

    def get_heights(
        self,
        lat: float,
        lon: float,
        start_s: int,
        length_s: int,
        step_s: int,
    ) -> TideForecast:
        self.calls += 1
        if self.points is not None:
            pts = list(self.points)
        else:
            pts = []
            t = start_s
            while t <= start_s + length_s:
                h = self.mean_m + self.amplitude_m * math.sin(math.tau * t / _M2_PERIOD_S)
                pts.append(TidePoint(timestamp_s=t, height_m=round(h, 3)))
                t += step_s

        return TideForecast(points=pts, station=self.station, timezone="UTC", datum="CD")
