from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict, List, Optional

import requests

from opendpd.config import load_config, resource_url
from opendpd.datasets.registry import get_descriptor
from opendpd.errors import InvalidArgument, RequestFailed, UnknownField
from opendpd.io.http import build_session, decode_rows, is_json, send


logger = logging.getLogger(__name__)

DEFAULT_MAX_VALUES = 5000
NO_SUCH_COLUMN = "no-such-column"


def _error_message(r: requests.Response) -> Dict[str, Any]:
    try:
        body = r.json()
    except ValueError:
        return {"message": (r.text or "").strip()}
    return body if isinstance(body, dict) else {"message": str(body)}


def _raise_for_bad_request(r: requests.Response, field: str, dataset_label: str) -> None:
    body = _error_message(r)
    message = str(body.get("message") or "Bad Request (HTTP 400)")
    error_code = str(body.get("errorCode") or body.get("code") or "")
    if NO_SUCH_COLUMN in error_code.lower() or NO_SUCH_COLUMN in message.lower():
        raise UnknownField(field, dataset_label, url=r.url, response=r)
    raise RequestFailed(f"API Error: {message}", url=r.url, status_code=r.status_code, response=r)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value == ""


def _pick_column(rows: List[Dict[str, Any]], field: str) -> Optional[str]:
    # The API sometimes renames the selected distinct column to "<field>_1".
    columns = set()
    for row in rows:
        columns.update(row.keys())
    for candidate in (field, f"{field}_1"):
        if candidate in columns:
            return candidate
    return None


def list_distinct_values(
    field: str,
    dataset: str = "incidents",
    year: Optional[int] = None,
    max_values: int = DEFAULT_MAX_VALUES,
    cfg: Optional[Dict[str, Any]] = None,
) -> Optional[List[Any]]:
    """Return the sorted distinct non-blank values of ``field`` in a dataset.

    Issues a single ``$select=distinct <field>`` request capped at
    ``max_values`` rows. Returns ``None`` when the field has no non-blank
    values. Raises ``UnknownField`` when the API reports the column does not
    exist.
    """
    if not isinstance(field, str) or not field:
        raise InvalidArgument("`field` must be a single, non-empty string naming the exact API field.")
    descriptor = get_descriptor(dataset, year)
    if isinstance(max_values, bool) or not isinstance(max_values, numbers.Integral) or max_values <= 0:
        raise InvalidArgument(f"`max_values` must be a positive integer, got {max_values!r}")
    cfg = cfg or load_config()

    url = resource_url(cfg, descriptor.resource_id)
    params = {"$select": f"distinct {field}", "$order": field, "$limit": int(max_values)}
    logger.info("Querying distinct values for field '%s' from dataset %s", field, descriptor.label)

    session = build_session(cfg["api"]["user_agent"], retries=cfg["api"]["retries"])
    try:
        r = send(session, url, params, timeout=cfg["api"]["timeout"])
    finally:
        session.close()

    if r.status_code == 400:
        _raise_for_bad_request(r, field, descriptor.label)
    if not r.ok:
        raise RequestFailed(
            f"HTTP {r.status_code} while fetching distinct values for {field} from {descriptor.label}. URL: {r.url}",
            url=r.url,
            status_code=r.status_code,
            response=r,
        )
    if not is_json(r):
        raise RequestFailed(f"API did not return JSON. URL: {r.url}", url=r.url, status_code=r.status_code, response=r)

    rows = decode_rows(r)
    if not rows:
        logger.info("API returned no distinct values for field '%s' in dataset %s", field, descriptor.label)
        return None

    column = _pick_column(rows, field)
    if column is None:
        columns = sorted({k for row in rows for k in row})
        logger.warning("Could not find field '%s' in API response columns: %s", field, ", ".join(columns))
        return None

    values = [row.get(column) for row in rows]
    values = [v for v in values if not _is_blank(v)]
    if len(rows) == max_values:
        logger.warning("Reached the limit of %d distinct values. Some values might be missing.", max_values)
    if not values:
        logger.info("No non-missing distinct values found after cleaning.")
        return None
    try:
        values = sorted(values)
    except TypeError:
        logger.warning("Could not sort distinct values; returning in API order.")
    return values
