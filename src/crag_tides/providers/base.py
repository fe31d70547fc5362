from __future__ import annotations

from abc import ABC, abstractmethod

from crag_tides.core.models import TideForecast


class TideProvider(ABC):
    """Fetch tide-height samples for a coordinate and time range."""

    @abstractmethod
    def get_heights(
        self,
        lat: float,
        lon: float,
        start_s: int,
        length_s: int,
        step_s: int,
    ) -> TideForecast:
        raise NotImplementedError
