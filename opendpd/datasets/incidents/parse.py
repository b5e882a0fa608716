from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from opendpd.clean import clean_data
from opendpd.config import DEFAULT_TZ
from .schema import DATASET


def clean_incidents_data(
    data: pd.DataFrame,
    text_fields: Optional[Iterable[str]] = DATASET.text_fields,
    date_fields: Optional[Iterable[str]] = DATASET.date_fields,
    tz: str = DEFAULT_TZ,
) -> pd.DataFrame:
    """Clean a frame returned by ``get_incidents``.

    Lowercases, trims and squishes the categorical text columns and parses the
    call/report timestamps in ``tz``. Pass ``None`` for either field list to
    skip that step.
    """
    return clean_data(data, text_fields=text_fields, date_fields=date_fields, tz=tz)
