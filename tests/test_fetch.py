from __future__ import annotations

import logging
import math

import pytest
import requests

from conftest import make_response
from opendpd.datasets.incidents.schema import DATASET as INCIDENTS
from opendpd.errors import DecodeFailed, InvalidArgument, RequestFailed
from opendpd.fetch import fetch_rows, normalize_select, query_dataset, validate_limit

URL = "https://www.dallasopendata.com/resource/qv6i-rri7.json"


def _rows(n):
    return [{"id": str(i)} for i in range(n)]


def test_unbounded_fetch_pages_until_short_page(socrata, cfg):
    server = socrata(_rows(2500))
    df = fetch_rows(URL, {}, math.inf, cfg)
    assert len(df) == 2500
    assert [c["$offset"] for c in server.calls] == [0, 1000, 2000]
    assert all(c["$limit"] == 1000 for c in server.calls)
    assert df["id"].tolist() == [str(i) for i in range(2500)]


def test_exact_multiple_ends_on_empty_page(socrata, cfg, caplog):
    caplog.set_level(logging.INFO, logger="opendpd.fetch")
    server = socrata(_rows(1000))
    df = fetch_rows(URL, {}, math.inf, cfg)
    assert len(df) == 1000
    assert len(server.calls) == 2
    assert "No more data found" in caplog.text


def test_limit_fifty_stops_at_fifty(socrata, cfg, caplog):
    caplog.set_level(logging.INFO, logger="opendpd.fetch")
    server = socrata(_rows(300))
    df = fetch_rows(URL, {}, 50, cfg)
    assert len(df) == 50
    assert server.calls == [{"$limit": 50, "$offset": 0}]
    assert "Reached limit of 50" in caplog.text


def test_bounded_limit_spans_pages(socrata, cfg):
    server = socrata(_rows(5000))
    df = fetch_rows(URL, {}, 1500, cfg)
    assert len(df) == 1500
    assert [(c["$offset"], c["$limit"]) for c in server.calls] == [(0, 1000), (1000, 500)]


def test_overshooting_page_is_truncated_in_order(socrata, cfg):
    overshoot = make_response(_rows(80))
    server = socrata(responses=[overshoot])
    df = fetch_rows(URL, {}, 50, cfg)
    assert len(server.calls) == 1
    assert df["id"].tolist() == [str(i) for i in range(50)]


def test_zero_limit_issues_no_request(socrata, cfg):
    server = socrata(_rows(10))
    df = fetch_rows(URL, {}, 0, cfg)
    assert df.empty
    assert server.calls == []


def test_no_matching_records_issues_one_request(socrata, cfg, caplog):
    caplog.set_level(logging.INFO, logger="opendpd.fetch")
    server = socrata([])
    df = fetch_rows(URL, {"$where": "beat IN ('999')"}, 1000, cfg)
    assert df.empty
    assert len(server.calls) == 1
    assert "Query returned no matching records" in caplog.text


def test_near_empty_body_counts_as_no_rows(socrata, cfg):
    socrata(responses=[make_response(text="  \n")])
    assert fetch_rows(URL, {}, 1000, cfg).empty


def test_http_error_raises_request_failed_with_url(socrata, cfg):
    socrata(responses=[make_response({"message": "boom"}, status=503, url=URL + "?$limit=1000")])
    with pytest.raises(RequestFailed) as exc:
        fetch_rows(URL, {}, 1000, cfg)
    assert exc.value.status_code == 503
    assert URL in str(exc.value)


def test_non_json_content_type_raises_request_failed(socrata, cfg):
    socrata(responses=[make_response(text="<html>maintenance</html>", content_type="text/html")])
    with pytest.raises(RequestFailed):
        fetch_rows(URL, {}, 1000, cfg)


def test_bad_json_raises_decode_failed(socrata, cfg):
    socrata(responses=[make_response(text="[{'id': 1}")])
    with pytest.raises(DecodeFailed) as exc:
        fetch_rows(URL, {}, 1000, cfg)
    assert "Failed to parse JSON response" in str(exc.value)


def test_transport_error_is_wrapped(socrata, cfg):
    server = socrata()
    server.session.get.side_effect = requests.ConnectionError("refused")
    with pytest.raises(RequestFailed) as exc:
        fetch_rows(URL, {}, 1000, cfg)
    assert exc.value.url == URL


def test_nested_objects_are_flattened(socrata, cfg):
    socrata([{"id": "1", "geocoded_column": {"latitude": "32.7", "longitude": "-96.8"}}])
    df = fetch_rows(URL, {}, 10, cfg)
    assert "geocoded_column.latitude" in df.columns


def test_query_dataset_sends_where_select_and_extra_params(socrata, cfg):
    server = socrata(_rows(3))
    query_dataset(
        INCIDENTS,
        start_date="2024-01-01",
        filters={"beat": "111"},
        select=["incidentnum", "beat", "incidentnum"],
        params={"$order": "date1 DESC"},
        cfg=cfg,
    )
    sent = server.calls[0]
    assert sent["$where"] == "date1 >= '2024-01-01T00:00:00' AND beat IN ('111')"
    assert sent["$select"] == "incidentnum,beat"
    assert sent["$order"] == "date1 DESC"
    assert server.urls[0] == URL


@pytest.mark.parametrize("bad", [-1, 2.5, True, "100"])
def test_validate_limit_rejects(bad):
    with pytest.raises(InvalidArgument):
        validate_limit(bad)


def test_validate_limit_accepts_unbounded_forms():
    assert validate_limit(None) == math.inf
    assert validate_limit(math.inf) == math.inf
    assert validate_limit(10.0) == 10


def test_normalize_select():
    assert normalize_select("beat") == ["beat"]
    with pytest.raises(InvalidArgument):
        normalize_select([1, 2])
