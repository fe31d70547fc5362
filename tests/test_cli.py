import json

from crag_tides import cli
from crag_tides.providers.mock import MockTideProvider

from conftest import T0


def test_windows_table_reuses_status_forecast(tmp_path, monkeypatch, capsys):
    location = {
        "location_id": "cliff",
        "config": {"is_tidal": True, "threshold_m": 0.5, "buffer_min": 0,
                   "latitude": 50.07, "longitude": -5.71},
        "points": [[T0, 0.2], [T0 + 3600, 0.6], [T0 + 7200, 1.0],
                   [T0 + 10800, 0.6], [T0 + 14400, 0.2]],
    }
    path = tmp_path / "cliff.json"
    path.write_text(json.dumps(location), encoding="utf-8")

    built = []

    def build(name, data):
        prov = MockTideProvider(points=cli._inline_points(data))
        built.append(prov)
        return prov

    monkeypatch.setattr(cli, "_build_provider", build)
    cli.main(["--location", str(path), "--now", str(T0 + 1800), "--windows"])

    assert built[0].calls == 1
    out = capsys.readouterr().out
    assert "Access windows" in out
    assert "2023-11-14T22:13:20.000Z" in out
    assert "2023-11-15T01:28:20.000Z" in out
