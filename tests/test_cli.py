from __future__ import annotations

import pandas as pd
import pytest

from conftest import make_response
from opendpd import cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("OPENDPD_CONFIG", "OPENDPD_BASE_URL", "OPENDPD_USER_AGENT", "OPENDPD_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


def test_fetch_writes_csv(tmp_path, socrata):
    server = socrata([{"arlbeat": "123", "race": "WHITE "}])
    out = tmp_path / "arrests.csv"
    rc = cli.main([
        "fetch", "arrests",
        "--start-date", "2024-01-01",
        "--filter", "beat=123",
        "--filter", "beat=456",
        "--limit", "all",
        "--order", "ararrestdate",
        "--clean",
        "--out", str(out),
    ])
    assert rc == 0
    sent = server.calls[0]
    assert sent["$where"] == "ararrestdate >= '2024-01-01T00:00:00' AND arlbeat IN (123, 456)"
    assert sent["$order"] == "ararrestdate"
    assert sent["$limit"] == 1000
    assert pd.read_csv(out)["race"].tolist() == ["white"]


def test_fetch_uof_bad_year_exits_nonzero(socrata):
    server = socrata([])
    assert cli.main(["fetch", "uof", "--year", "2021"]) == 1
    assert server.calls == []


def test_fetch_unknown_filter(socrata):
    server = socrata([])
    assert cli.main(["fetch", "incidents", "--filter", "precinct=4"]) == 1
    assert server.calls == []


def test_values_prints_sorted(socrata, capsys):
    socrata(responses=[make_response([{"severity": "M"}, {"severity": "F"}])])
    assert cli.main(["values", "severity", "--dataset", "charges"]) == 0
    assert capsys.readouterr().out.split() == ["F", "M"]


def test_datasets_xlsx(tmp_path):
    out = tmp_path / "datasets.xlsx"
    assert cli.main(["datasets", "--out", str(out)]) == 0
    assert out.exists()


def test_limit_parsing():
    assert cli._parse_limit("ALL") == float("inf")
    assert cli._parse_limit("25") == 25


def test_bad_config_exits_nonzero(tmp_path, socrata):
    server = socrata([])
    path = tmp_path / "cfg.yaml"
    path.write_text("api:\n  page_size: 5000\n", encoding="utf-8")
    assert cli.main(["--config", str(path), "fetch", "ois"]) == 1
    assert server.calls == []
