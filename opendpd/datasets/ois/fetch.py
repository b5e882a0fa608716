from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import pandas as pd

from opendpd.fetch import DEFAULT_LIMIT, Limit, query_dataset
from .schema import DATASET


def get_ois(
    start_date: Any = None,
    end_date: Any = None,
    outcome: Any = None,
    suspect_weapon: Any = None,
    disposition: Any = None,
    limit: Limit = DEFAULT_LIMIT,
    select: Optional[Union[str, Sequence[str]]] = None,
    where: Optional[str] = None,
    cfg: Optional[Dict[str, Any]] = None,
    **params: Any,
) -> pd.DataFrame:
    """Fetch Dallas Police officer-involved shootings (``4gmt-jyx2``)."""
    return query_dataset(
        DATASET,
        start_date=start_date,
        end_date=end_date,
        filters={"outcome": outcome, "suspect_weapon": suspect_weapon, "disposition": disposition},
        where=where,
        limit=limit,
        select=select,
        params=params,
        cfg=cfg,
    )
