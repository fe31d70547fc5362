"""Redis key naming conventions for the crag-tides cache layer.

Keys carry a schema version suffix so a change to the cached payload shape
can roll out without reading stale entries.
"""
from __future__ import annotations

_PREFIX = "tides"
_RESULT_VERSION = "v1"


def tides_location(location_id: str) -> str:
    """Key for a location's serialized forecast result."""
    return f"{_PREFIX}:location:{location_id}:{_RESULT_VERSION}"
