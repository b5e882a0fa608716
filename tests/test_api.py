from __future__ import annotations

from opendpd import api
from opendpd.api import UnknownField, get_incidents


def test_public_names_resolve():
    for name in api.__all__:
        assert getattr(api, name) is not None
    assert callable(get_incidents)
    assert issubclass(UnknownField, api.RequestFailed)
