from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Union

import pandas as pd

from opendpd.errors import InvalidArgument
from opendpd.fetch import DEFAULT_LIMIT, Limit, normalize_select, query_dataset
from .schema import DATASET

logger = logging.getLogger(__name__)

FilterValues = Optional[Union[str, int, float, Sequence[Union[str, int, float]]]]


def _with_coordinates(select: Optional[Sequence[str]]) -> Optional[Sequence[str]]:
    columns = normalize_select(select)
    if columns is None:
        return None
    for col in DATASET.geo_columns:
        if col not in columns:
            columns.append(col)
            logger.info("Adding '%s' to $select for geographic conversion.", col)
    return columns


def to_geodataframe(df: pd.DataFrame) -> pd.DataFrame:
    """Turn incident rows into an EPSG:2276 GeoDataFrame when possible.

    Falls back to the plain frame, with a warning, when geopandas is missing
    or the coordinate columns were not returned.
    """
    if df.empty:
        return df
    try:
        from opendpd.geo import spatial
    except ImportError:
        logger.warning("geopandas is needed for convert_geo=True but is not installed. Returning a regular DataFrame.")
        return df

    x_col, y_col = DATASET.geo_columns
    missing = [c for c in (x_col, y_col) if c not in df.columns]
    if missing:
        logger.warning(
            "Cannot convert to geographic object. Required coordinate columns missing: %s "
            "(was select used without them?). Returning a regular DataFrame.",
            ", ".join(missing),
        )
        return df

    logger.info("Attempting conversion to geographic object (CRS %s)...", DATASET.crs)
    try:
        gdf = spatial.points_from_xy(df, x_col, y_col, DATASET.crs)
    except (ValueError, TypeError) as exc:
        logger.warning("Failed to convert data to geographic object: %s. Returning rows with valid coordinates.", exc)
        valid = spatial.coerce_coordinates(df, x_col, y_col)
        return valid.dropna(subset=[x_col, y_col])
    if gdf.empty:
        logger.warning("No rows with valid coordinates found; cannot create geographic object.")
        return pd.DataFrame(gdf.drop(columns="geometry"))
    logger.info("Converted %d rows to geographic object with CRS %s.", len(gdf), DATASET.crs)
    return gdf


def get_incidents(
    start_date: Any = None,
    end_date: Any = None,
    nibrs_group: FilterValues = None,
    nibrs_code: FilterValues = None,
    nibrs_crime_against: FilterValues = None,
    zip_code: FilterValues = None,
    beat: FilterValues = None,
    division: FilterValues = None,
    sector: FilterValues = None,
    district: FilterValues = None,
    convert_geo: bool = False,
    limit: Limit = DEFAULT_LIMIT,
    select: Optional[Union[str, Sequence[str]]] = None,
    where: Optional[str] = None,
    cfg: Optional[Dict[str, Any]] = None,
    **params: Any,
) -> pd.DataFrame:
    """Fetch Dallas Police incidents (``qv6i-rri7``).

    Dates filter on ``date1`` and are inclusive on both ends. ``where``
    overrides every other filter. Extra keyword arguments are passed to the
    API verbatim, e.g. ``**{"$order": "date1 DESC"}``. With ``convert_geo``
    the result is a GeoDataFrame in EPSG:2276 built from ``x_coordinate`` and
    ``y_cordinate``.
    """
    if not isinstance(convert_geo, bool):
        raise InvalidArgument("`convert_geo` must be True or False.")
    if convert_geo:
        select = _with_coordinates(select)

    df = query_dataset(
        DATASET,
        start_date=start_date,
        end_date=end_date,
        filters={
            "nibrs_group": nibrs_group,
            "nibrs_code": nibrs_code,
            "nibrs_crime_against": nibrs_crime_against,
            "zip_code": zip_code,
            "beat": beat,
            "division": division,
            "sector": sector,
            "district": district,
        },
        where=where,
        limit=limit,
        select=select,
        params=params,
        cfg=cfg,
    )
    if convert_geo:
        df = to_geodataframe(df)
    return df
