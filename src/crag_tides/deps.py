"""Process-wide orchestrator wiring for the API."""
from __future__ import annotations

from typing import Optional

from crag_tides.cache.store import RedisCacheStore
from crag_tides.core.forecast import ForecastOrchestrator
from crag_tides.locations import SupabaseLocationStore
from crag_tides.providers.worldtides import WorldTidesProvider

_orchestrator: Optional[ForecastOrchestrator] = None


def get_orchestrator() -> ForecastOrchestrator:
    """FastAPI dependency; the instance (and its HTTP session) persists across requests."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = ForecastOrchestrator(
            locations=SupabaseLocationStore(),
            provider=WorldTidesProvider(),
            cache=RedisCacheStore(),
        )
    return _orchestrator
