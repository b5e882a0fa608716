from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import pandas as pd

from opendpd.fetch import DEFAULT_LIMIT, Limit, query_dataset
from .schema import for_year


def get_uof(
    year: int,
    start_date: Any = None,
    end_date: Any = None,
    force_type: Any = None,
    reason: Any = None,
    service_type: Any = None,
    limit: Limit = DEFAULT_LIMIT,
    select: Optional[Union[str, Sequence[str]]] = None,
    where: Optional[str] = None,
    cfg: Optional[Dict[str, Any]] = None,
    **params: Any,
) -> pd.DataFrame:
    """Fetch one year of Dallas Police use-of-force records (2017-2020).

    Each year is a separate endpoint. The date and service-type columns are
    ``occurred_d``/``service_ty`` before 2020 and ``occurred_dt``/``service_type``
    from 2020, so the column set differs between years.
    """
    descriptor = for_year(year)
    return query_dataset(
        descriptor,
        start_date=start_date,
        end_date=end_date,
        filters={"force_type": force_type, "reason": reason, "service_type": service_type},
        where=where,
        limit=limit,
        select=select,
        params=params,
        cfg=cfg,
    )
