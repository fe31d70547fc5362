"""Admin-only tidal configuration for a location."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from crag_tides.auth import require_admin
from crag_tides.core.forecast import ForecastOrchestrator
from crag_tides.deps import get_orchestrator
from crag_tides.locations import TidalConfigUpdate

router = APIRouter(prefix="/locations", tags=["locations"])


class TidalConfigOut(BaseModel):
    id: str
    is_tidal: bool
    tidal_max_height_m: Optional[float] = None
    tidal_buffer_min: int = 0
    tidal_notes: Optional[str] = None


class UpdateTidalResponse(BaseModel):
    success: bool = True
    location: TidalConfigOut


@router.put("/{location_id}/tidal", response_model=UpdateTidalResponse)
def update_tidal_config(
    location_id: str,
    body: TidalConfigUpdate,
    admin_id: str = Depends(require_admin),
    orchestrator: ForecastOrchestrator = Depends(get_orchestrator),
):
    stored = orchestrator.update_config(location_id, body)
    return UpdateTidalResponse(
        location=TidalConfigOut(
            id=location_id,
            is_tidal=stored.is_tidal,
            tidal_max_height_m=stored.threshold_m,
            tidal_buffer_min=stored.buffer_min,
            tidal_notes=stored.notes,
        )
    )
