import pytest

from crag_tides.cache.store import MemoryCacheStore
from crag_tides.core.forecast import ForecastOrchestrator
from crag_tides.core.models import TidalConfig, TidePoint
from crag_tides.locations import MemoryLocationStore
from crag_tides.providers.mock import MockTideProvider

T0 = 1_700_000_000


def worked_series(t0=T0):
    return [
        TidePoint(t0, 0.2),
        TidePoint(t0 + 3600, 0.6),
        TidePoint(t0 + 7200, 1.0),
        TidePoint(t0 + 10800, 0.6),
        TidePoint(t0 + 14400, 0.2),
    ]


@pytest.fixture
def tidal_config():
    return TidalConfig(
        is_tidal=True,
        threshold_m=0.5,
        buffer_min=0,
        latitude=50.07,
        longitude=-5.71,
        notes="Approach via the gully",
    )


@pytest.fixture
def locations(tidal_config):
    return MemoryLocationStore(
        {
            "cliff": tidal_config,
            "inland": TidalConfig(is_tidal=False, latitude=53.3, longitude=-1.6),
        }
    )


@pytest.fixture
def provider():
    return MockTideProvider(points=worked_series())


@pytest.fixture
def cache():
    return MemoryCacheStore()


@pytest.fixture
def orchestrator(locations, provider, cache):
    return ForecastOrchestrator(locations=locations, provider=provider, cache=cache)
