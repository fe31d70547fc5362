"""Public tidal status for a location."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from crag_tides.core.forecast import ForecastOrchestrator, clamp_forecast_hours
from crag_tides.core.models import ForecastResult
from crag_tides.deps import get_orchestrator
from crag_tides.errors import InvalidRequestError

router = APIRouter(prefix="/tides", tags=["tides"])


@router.get("", response_model=ForecastResult)
def get_tidal_status(
    location_id: Optional[str] = Query(default=None),
    hours: Optional[str] = Query(default=None, description="Forecast horizon, clamped to 24..168"),
    orchestrator: ForecastOrchestrator = Depends(get_orchestrator),
):
    if not location_id:
        raise InvalidRequestError("location_id is required")

    return orchestrator.get_status(
        location_id,
        forecast_hours=clamp_forecast_hours(hours, orchestrator.cfg),
    )
