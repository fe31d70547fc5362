"""FastAPI REST backend for tidal access forecasts."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crag_tides.db import get_supabase
from crag_tides.errors import TidesError
from crag_tides.routers import locations, tides

log = logging.getLogger(__name__)

app = FastAPI(title="Crag Tides", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(tides.router)
app.include_router(locations.router)


@app.exception_handler(TidesError)
async def handle_tides_error(request: Request, exc: TidesError) -> JSONResponse:
    if exc.status_code >= 500:
        log.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/health")
def health():
    redis_ok = False
    try:
        from crag_tides.cache.redis_client import get_redis
        r = get_redis()
        if r is not None:
            r.ping()
            redis_ok = True
    except Exception:
        pass

    supabase_ok = get_supabase() is not None

    return {"status": "ok", "redis": redis_ok, "supabase": supabase_ok}
