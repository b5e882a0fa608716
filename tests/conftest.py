from __future__ import annotations

import json
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from opendpd.config import load_config

ENV_VARS = ("OPENDPD_CONFIG", "OPENDPD_BASE_URL", "OPENDPD_USER_AGENT", "OPENDPD_TIMEOUT")


def make_response(
    payload: Any = None,
    status: int = 200,
    text: Optional[str] = None,
    content_type: str = "application/json",
    url: str = "https://www.dallasopendata.com/resource/test.json",
) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.ok = status < 400
    r.url = url
    r.headers = {"Content-Type": content_type}
    r.text = json.dumps(payload) if text is None else text
    r.json.side_effect = lambda: json.loads(r.text)
    return r


class FakeSocrata:
    """Serves ``rows`` honouring ``$limit`` / ``$offset`` and records every call."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, responses: Optional[List[MagicMock]] = None):
        self.rows = rows or []
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []
        self.urls: List[str] = []

    def get(self, url, params=None, timeout=None):
        params = dict(params or {})
        self.calls.append(params)
        self.urls.append(url)
        if self.responses:
            return self.responses.pop(0)
        start = int(params.get("$offset", 0))
        size = int(params.get("$limit", 1000))
        return make_response(self.rows[start:start + size], url=url)


@pytest.fixture
def cfg(monkeypatch) -> Dict[str, Any]:
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return load_config()


@pytest.fixture
def socrata(monkeypatch):
    """Install a FakeSocrata in place of the HTTP session for fetch and values."""

    def _install(rows=None, responses=None) -> FakeSocrata:
        server = FakeSocrata(rows, responses)
        session = MagicMock()
        session.get.side_effect = server.get
        monkeypatch.setattr("opendpd.fetch.build_session", lambda *a, **k: session)
        monkeypatch.setattr("opendpd.values.build_session", lambda *a, **k: session)
        server.session = session
        return server

    return _install


@pytest.fixture
def incident_rows() -> List[Dict[str, Any]]:
    return [
        {"incidentnum": f"{n:06d}-2024", "division": "CENTRAL", "x_coordinate": str(2490000 + n), "y_cordinate": str(6970000 + n)}
        for n in range(5)
    ]
