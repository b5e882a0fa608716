from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import pandas as pd

from opendpd.fetch import DEFAULT_LIMIT, Limit, query_dataset
from .schema import DATASET


def get_arrests(
    start_date: Any = None,
    end_date: Any = None,
    zip_code: Any = None,
    beat: Any = None,
    sector: Any = None,
    district: Any = None,
    limit: Limit = DEFAULT_LIMIT,
    select: Optional[Union[str, Sequence[str]]] = None,
    where: Optional[str] = None,
    cfg: Optional[Dict[str, Any]] = None,
    **params: Any,
) -> pd.DataFrame:
    """Fetch Dallas Police arrests (``sdr7-6v3j``).

    Dates filter on ``ararrestdate``; geography filters use the arrest
    location fields (``arlzip``, ``arlbeat``, ``arlsector``, ``arldistrict``).
    Beat and sector are numeric in the source, so numeric strings are sent
    unquoted.
    """
    return query_dataset(
        DATASET,
        start_date=start_date,
        end_date=end_date,
        filters={"zip_code": zip_code, "beat": beat, "sector": sector, "district": district},
        where=where,
        limit=limit,
        select=select,
        params=params,
        cfg=cfg,
    )
