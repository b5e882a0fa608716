from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import pandas as pd

from opendpd.fetch import DEFAULT_LIMIT, Limit, query_dataset
from .schema import DATASET


def get_charges(
    start_date: Any = None,
    end_date: Any = None,
    charge_description: Any = None,
    severity: Any = None,
    penalty_class: Any = None,
    statute: Any = None,
    nibrs_group: Any = None,
    nibrs_code: Any = None,
    nibrs_crime_against: Any = None,
    limit: Limit = DEFAULT_LIMIT,
    select: Optional[Union[str, Sequence[str]]] = None,
    where: Optional[str] = None,
    cfg: Optional[Dict[str, Any]] = None,
    **params: Any,
) -> pd.DataFrame:
    """Fetch Dallas Police arrest charges (``9u3q-af6p``).

    ``arrestdate`` is a text column, so the date bounds are plain
    ``YYYY-MM-DD`` strings. Charge description matching is case-sensitive.
    """
    return query_dataset(
        DATASET,
        start_date=start_date,
        end_date=end_date,
        filters={
            "charge_description": charge_description,
            "severity": severity,
            "penalty_class": penalty_class,
            "statute": statute,
            "nibrs_group": nibrs_group,
            "nibrs_code": nibrs_code,
            "nibrs_crime_against": nibrs_crime_against,
        },
        where=where,
        limit=limit,
        select=select,
        params=params,
        cfg=cfg,
    )
