from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from crag_tides.cache.store import MemoryCacheStore
from crag_tides.config import settings
from crag_tides.core.forecast import ForecastOrchestrator, clamp_forecast_hours
from crag_tides.core.models import TidalConfig, TideForecast, TidePoint, iso_utc
from crag_tides.core.windows import apply_window_buffer, compute_raw_access_windows
from crag_tides.locations import MemoryLocationStore
from crag_tides.providers.base import TideProvider
from crag_tides.providers.mock import MockTideProvider
from crag_tides.providers.worldtides import WorldTidesProvider


def _read_location(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def _inline_points(data: dict) -> Optional[List[TidePoint]]:
    rows = data.get("points")
    if rows is None:
        return None
    return [TidePoint(timestamp_s=int(t), height_m=float(h)) for t, h in rows]


def _build_provider(name: str, data: dict) -> TideProvider:
    if name == "mock":
        return MockTideProvider(points=_inline_points(data))
    if name == "worldtides":
        return WorldTidesProvider()
    raise SystemExit(f"Unknown provider: {name}")


class _RecordingProvider(TideProvider):
    """Keeps the last forecast so the windows table matches the status row
    without a second upstream request."""

    def __init__(self, inner: TideProvider) -> None:
        self.inner = inner
        self.last: Optional[TideForecast] = None

    def get_heights(self, lat, lon, start_s, length_s, step_s) -> TideForecast:
        self.last = self.inner.get_heights(lat, lon, start_s, length_s, step_s)
        return self.last


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Tidal access status for one location")
    ap.add_argument("--location", default="locations/sample_location.json", help="Path to a location JSON file")
    ap.add_argument("--provider", default="mock", choices=["mock", "worldtides"])
    ap.add_argument("--hours", type=int, default=settings.forecast_hours_default)
    ap.add_argument("--now", type=int, default=None, help="Epoch seconds to evaluate at (default: wall clock)")
    ap.add_argument("--windows", action="store_true", help="Also list every buffered window")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    data = _read_location(Path(args.location))
    location_id = str(data.get("location_id", "local"))
    config = TidalConfig(**data.get("config", {}))
    provider = _RecordingProvider(_build_provider(args.provider, data))

    orchestrator = ForecastOrchestrator(
        locations=MemoryLocationStore({location_id: config}),
        provider=provider,
        cache=MemoryCacheStore(),
    )
    now_s = args.now if args.now is not None else int(time.time())
    hours = clamp_forecast_hours(args.hours)
    result = orchestrator.get_status(location_id, now_s=now_s, forecast_hours=hours)

    console = Console()

    table = Table(title=f"Tidal access: {location_id}")
    table.add_column("Field")
    table.add_column("Value")
    for name, value in result.model_dump().items():
        if name == "next_window" and value:
            value = f"{value['start']} → {value['end']}"
        table.add_row(name, "" if value is None else str(value))
    console.print(table)

    if args.windows and result.tidal:
        forecast = provider.last
        raw = compute_raw_access_windows(forecast.points, config.threshold_m)
        buffered = apply_window_buffer(raw, config.buffer_min)

        wt = Table(title=f"Access windows (threshold {config.threshold_m} m, buffer {config.buffer_min} min)")
        wt.add_column("Start (UTC)")
        wt.add_column("End (UTC)")
        wt.add_column("Minutes")
        for w in buffered:
            wt.add_row(iso_utc(w.start_s), iso_utc(w.end_s), f"{w.duration_s / 60:.0f}")
        console.print(wt)


if __name__ == "__main__":
    main()
