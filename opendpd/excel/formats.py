from __future__ import annotations

import pandas as pd


def geometry_to_wkt(series: pd.Series) -> pd.Series:
    return series.map(lambda g: g.wkt if g is not None and hasattr(g, "wkt") else None)


def excel_safe(df: pd.DataFrame) -> pd.DataFrame:
    """Return a plain frame openpyxl can store.

    Time-zone-aware timestamps keep their local wall time, geometry becomes
    WKT text and categoricals become their labels.
    """
    out = pd.DataFrame(df).copy()
    for col in out.columns:
        series = out[col]
        if isinstance(series.dtype, pd.DatetimeTZDtype):
            out[col] = series.dt.tz_localize(None)
        elif isinstance(series.dtype, pd.CategoricalDtype):
            out[col] = series.astype(object)
        elif col == "geometry":
            out[col] = geometry_to_wkt(series)
    return out
