"""WorldTides v3 height forecasts."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from crag_tides.config import settings
from crag_tides.core.models import TideForecast, TidePoint
from crag_tides.errors import UpstreamProviderError
from crag_tides.providers.base import TideProvider
from crag_tides.providers.http import HTTPClient

log = logging.getLogger(__name__)


def _finite(value: Any) -> Optional[float]:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def parse_heights(data: Dict[str, Any]) -> List[TidePoint]:
    """Extract ``heights`` rows, skipping any with a non-finite dt or height."""
    rows = data.get("heights")
    if not isinstance(rows, list):
        return []

    out: List[TidePoint] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        dt = _finite(row.get("dt"))
        height = _finite(row.get("height"))
        if dt is None or height is None:
            continue
        out.append(TidePoint(timestamp_s=int(dt) if dt.is_integer() else dt, height_m=height))
    return out


@dataclass
class WorldTidesProvider(TideProvider):
    """
    Heights layer:
      - Requests predicted heights for a lat/lon at a fixed step
      - Datum is chart datum unless configured otherwise
      - Surfaces body-level ``status``/``error`` fields as provider errors
    """

    api_key: str = field(default_factory=lambda: settings.worldtides_api_key)
    url: str = field(default_factory=lambda: settings.worldtides_url)
    datum: str = field(default_factory=lambda: settings.worldtides_datum)
    http: HTTPClient = field(
        default_factory=lambda: HTTPClient(
            user_agent="CragTides/0.1.0",
            timeout_s=settings.http_timeout_s,
            tries=settings.http_tries,
        )
    )

    def get_heights(
        self,
        lat: float,
        lon: float,
        start_s: int,
        length_s: int,
        step_s: int,
    ) -> TideForecast:
        if not self.api_key:
            raise UpstreamProviderError("WorldTides API key is not configured")

        params = {
            "heights": "",
            "localtime": "",
            "datum": self.datum,
            "lat": lat,
            "lon": lon,
            "start": start_s,
            "length": length_s,
            "step": step_s,
            "key": self.api_key,
        }

        try:
            data = self.http.get_json(self.url, params=params)
        except (requests.RequestException, ValueError) as e:
            log.warning("WorldTides request failed for (%.4f, %.4f): %s", lat, lon, e)
            raise UpstreamProviderError("Failed to fetch tide data") from e

        if not isinstance(data, dict):
            raise UpstreamProviderError("Malformed WorldTides response")

        status = data.get("status")
        if (status is not None and status != 200) or data.get("error"):
            raise UpstreamProviderError(str(data.get("error") or "WorldTides request failed"))

        points = parse_heights(data)
        log.debug("WorldTides returned %d usable samples for (%.4f, %.4f)", len(points), lat, lon)

        return TideForecast(
            points=points,
            station=data.get("station") or None,
            timezone=data.get("timezone") or None,
            datum=data.get("responseDatum") or None,
            copyright=data.get("copyright") or None,
        )
