from __future__ import annotations

import pytest
import yaml

from opendpd.config import DEFAULT_BASE_URL, load_config, resource_url
from opendpd.errors import InvalidArgument


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("OPENDPD_CONFIG", "OPENDPD_BASE_URL", "OPENDPD_USER_AGENT", "OPENDPD_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    cfg = load_config()
    assert cfg["api"]["base_url"] == DEFAULT_BASE_URL
    assert cfg["api"]["page_size"] == 1000
    assert cfg["api"]["timeout"] is None
    assert cfg["api"]["retries"] == 0
    assert cfg["api"]["user_agent"].startswith("opendpd/")
    assert cfg["cleaning"]["tz"] == "America/Chicago"
    assert resource_url(cfg, "qv6i-rri7") == f"{DEFAULT_BASE_URL}/qv6i-rri7.json"


def test_yaml_file_and_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "opendpd.yaml"
    path.write_text(
        yaml.safe_dump({"api": {"base_url": "https://mirror.example/resource/", "page_size": 250}, "cleaning": {"tz": "UTC"}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("OPENDPD_CONFIG", str(path))
    monkeypatch.setenv("OPENDPD_TIMEOUT", "30")
    cfg = load_config()
    assert cfg["api"]["base_url"] == "https://mirror.example/resource"
    assert cfg["api"]["page_size"] == 250
    assert cfg["api"]["timeout"] == 30.0
    assert cfg["cleaning"]["tz"] == "UTC"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize("page_size", [0, 1001, "500", True])
def test_bad_page_size(tmp_path, page_size):
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump({"api": {"page_size": page_size}}), encoding="utf-8")
    with pytest.raises(InvalidArgument):
        load_config(str(path))


def test_small_page_size_drives_pagination(tmp_path, socrata):
    from opendpd.datasets.ois.fetch import get_ois

    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump({"api": {"page_size": 2}}), encoding="utf-8")
    server = socrata([{"case": str(i)} for i in range(5)])
    df = get_ois(limit=None, cfg=load_config(str(path)))
    assert len(df) == 5
    assert [c["$limit"] for c in server.calls] == [2, 2, 2]
