import math

import pytest
import requests

from crag_tides.errors import UpstreamProviderError
from crag_tides.providers.worldtides import WorldTidesProvider, parse_heights


def _provider(response=None, exc=None):
    prov = WorldTidesProvider(api_key="test-key")
    seen = {}

    def fake_get_json(url, params=None, timeout_s=None):
        seen["url"] = url
        seen["params"] = params
        if exc is not None:
            raise exc
        return response

    prov.http.get_json = fake_get_json
    return prov, seen


def test_parses_heights_and_metadata():
    prov, seen = _provider(
        {
            "status": 200,
            "heights": [{"dt": 100, "height": 0.5}, {"dt": 1000, "height": 1.25}],
            "station": "Newlyn",
            "timezone": "Europe/London",
            "responseDatum": "CD",
            "copyright": "Tidal data (c) WorldTides",
        }
    )
    forecast = prov.get_heights(50.1, -5.5, start_s=0, length_s=3600, step_s=900)

    assert [(p.timestamp_s, p.height_m) for p in forecast.points] == [(100, 0.5), (1000, 1.25)]
    assert forecast.station == "Newlyn"
    assert forecast.timezone == "Europe/London"
    assert forecast.datum == "CD"
    assert seen["params"]["step"] == 900
    assert seen["params"]["datum"] == "CD"
    assert seen["params"]["key"] == "test-key"


def test_parse_heights_drops_unusable_rows():
    rows = [
        {"dt": 100, "height": 0.5},
        {"dt": "bad", "height": 0.5},
        {"dt": 200, "height": None},
        {"dt": 300, "height": math.nan},
        "garbage",
        {"dt": 400, "height": "0.75"},
    ]
    points = parse_heights({"heights": rows})
    assert [(p.timestamp_s, p.height_m) for p in points] == [(100, 0.5), (400, 0.75)]


def test_parse_heights_missing_list():
    assert parse_heights({"status": 200}) == []


def test_body_error_surfaces_message():
    prov, _ = _provider({"status": 400, "error": "No location found"})
    with pytest.raises(UpstreamProviderError, match="No location found"):
        prov.get_heights(0.0, 0.0, 0, 3600, 900)


def test_transport_error_wrapped():
    prov, _ = _provider(exc=requests.ConnectionError("boom"))
    with pytest.raises(UpstreamProviderError, match="Failed to fetch"):
        prov.get_heights(0.0, 0.0, 0, 3600, 900)


def test_malformed_body():
    prov, _ = _provider(["not", "an", "object"])
    with pytest.raises(UpstreamProviderError):
        prov.get_heights(0.0, 0.0, 0, 3600, 900)


def test_missing_api_key():
    prov = WorldTidesProvider(api_key="")
    with pytest.raises(UpstreamProviderError, match="not configured"):
        prov.get_heights(0.0, 0.0, 0, 3600, 900)


class _Resp:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


def test_http_client_retries_dropped_connections():
    from crag_tides.providers.http import HTTPClient

    client = HTTPClient(user_agent="test", tries=3, backoff_s=0)
    attempts = []

    def flaky_get(url, params=None, timeout=None):
        attempts.append(params)
        if len(attempts) < 3:
            raise requests.ConnectionError("reset")
        return _Resp({"heights": []})

    client.s.get = flaky_get
    assert client.get_json("https://example.test", params={"lat": 1}) == {"heights": []}
    assert len(attempts) == 3


def test_http_client_gives_up_after_tries():
    from crag_tides.providers.http import HTTPClient

    client = HTTPClient(user_agent="test", tries=2, backoff_s=0)

    def down(url, params=None, timeout=None):
        raise requests.ReadTimeout("slow")

    client.s.get = down
    with pytest.raises(requests.ReadTimeout):
        client.get_json("https://example.test")
