from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from opendpd.config import load_config, resource_url
from opendpd.datasets.base import DatasetDescriptor
from opendpd.errors import InvalidArgument
from opendpd.io.http import build_session, get_rows
from opendpd.query import build_where


logger = logging.getLogger(__name__)

UNBOUNDED = math.inf
DEFAULT_LIMIT = 1000

Limit = Optional[Union[int, float]]


def validate_limit(limit: Limit) -> Union[int, float]:
    if limit is None:
        return UNBOUNDED
    if isinstance(limit, bool) or not isinstance(limit, numbers.Real):
        raise InvalidArgument(f"`limit` must be a non-negative integer or math.inf, got {limit!r}")
    if limit == UNBOUNDED:
        return UNBOUNDED
    if limit < 0 or not float(limit).is_integer():
        raise InvalidArgument(f"`limit` must be a non-negative integer or math.inf, got {limit!r}")
    return int(limit)


def normalize_select(select: Optional[Union[str, Sequence[str]]]) -> Optional[List[str]]:
    if select is None:
        return None
    columns = [select] if isinstance(select, str) else list(select)
    if not all(isinstance(c, str) and c for c in columns):
        raise InvalidArgument("`select` must be a column name or a list of column names.")
    return list(dict.fromkeys(columns))


def fetch_rows(
    url: str,
    params: Dict[str, Any],
    limit: Union[int, float],
    cfg: Dict[str, Any],
    label: Optional[str] = None,
) -> pd.DataFrame:
    """Page through ``url`` until ``limit`` rows, a short page or an empty page.

    Each request asks for ``min(remaining, page_size)`` rows at the running
    offset. The result keeps arrival order and never exceeds ``limit`` rows.
    """
    suffix = f" for {label}" if label else ""
    if limit == 0:
        logger.info("Limit is zero; returning empty dataset.")
        return pd.DataFrame()

    page_cap = cfg["api"]["page_size"]
    timeout = cfg["api"]["timeout"]
    session = build_session(cfg["api"]["user_agent"], retries=cfg["api"]["retries"])

    rows: List[Dict[str, Any]] = []
    offset = 0
    logger.info("Starting data retrieval%s...", suffix)
    try:
        while True:
            page_size = int(min(limit - len(rows), page_cap))
            page_params = dict(params)
            page_params["$limit"] = page_size
            page_params["$offset"] = offset
            batch = get_rows(session, url, page_params, timeout=timeout)
            if not batch:
                logger.info("No more data found%s.", suffix)
                break
            rows.extend(batch)
            offset += len(batch)
            if len(rows) >= limit:
                logger.info("Reached limit of %s", limit)
                break
            if len(batch) < page_size:
                logger.info("Retrieved last page%s.", suffix)
                break
    finally:
        session.close()

    logger.info("Total records retrieved%s: %d", suffix, len(rows))
    if not rows:
        logger.info("Query returned no matching records%s.", suffix)
        return pd.DataFrame()
    if limit != UNBOUNDED and len(rows) > limit:
        rows = rows[: int(limit)]
    return pd.json_normalize(rows)


def query_dataset(
    descriptor: DatasetDescriptor,
    start_date: Any = None,
    end_date: Any = None,
    filters: Optional[Dict[str, Any]] = None,
    where: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
    select: Optional[Union[str, Sequence[str]]] = None,
    params: Optional[Dict[str, Any]] = None,
    cfg: Optional[Dict[str, Any]] = None,
) -> pd.DataFrame:
    limit = validate_limit(limit)
    where_expr = build_where(descriptor, start_date, end_date, filters, where)
    columns = normalize_select(select)
    cfg = cfg or load_config()

    query: Dict[str, Any] = dict(params or {})
    if where_expr is not None:
        query["$where"] = where_expr
    if columns is not None:
        query["$select"] = ",".join(columns)

    label = descriptor.label if descriptor.year is not None else None
    df = fetch_rows(resource_url(cfg, descriptor.resource_id), query, limit, cfg, label=label)
    logger.info("Data retrieval%s complete.", f" for {label}" if label else "")
    return df
