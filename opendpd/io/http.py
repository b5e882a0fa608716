from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from opendpd.errors import DecodeFailed, RequestFailed


logger = logging.getLogger(__name__)


def build_session(user_agent: str, retries: int = 0, backoff: float = 0.5) -> requests.Session:
    retry = Retry(
        total=retries,
        backoff_factor=backoff,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": user_agent})
    return session


def send(session: requests.Session, url: str, params: Dict[str, Any], timeout: Optional[float] = None) -> requests.Response:
    try:
        return session.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise RequestFailed(f"Request failed: {exc}. URL: {url}", url=url) from exc


def is_json(r: requests.Response) -> bool:
    content_type = r.headers.get("Content-Type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


def decode_rows(r: requests.Response) -> List[Dict[str, Any]]:
    text = r.text or ""
    if len(text.strip()) <= 2:
        return []
    try:
        payload = r.json()
    except ValueError as exc:
        raise DecodeFailed(f"Failed to parse JSON response. Error: {exc}", url=r.url, response=r) from exc
    if not isinstance(payload, list):
        raise DecodeFailed(f"Expected a JSON array, got {type(payload).__name__}", url=r.url, response=r)
    return payload


def get_rows(session: requests.Session, url: str, params: Dict[str, Any], timeout: Optional[float] = None) -> List[Dict[str, Any]]:
    r = send(session, url, params, timeout=timeout)
    if not r.ok:
        raise RequestFailed(
            f"HTTP {r.status_code} while fetching data. URL: {r.url}",
            url=r.url,
            status_code=r.status_code,
            response=r,
        )
    if not is_json(r):
        raise RequestFailed(
            f"API did not return JSON (Content-Type: {r.headers.get('Content-Type')}). URL: {r.url}",
            url=r.url,
            status_code=r.status_code,
            response=r,
        )
    return decode_rows(r)
