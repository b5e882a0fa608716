from __future__ import annotations

import logging

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point

logger = logging.getLogger(__name__)


def coerce_coordinates(df: pd.DataFrame, x_col: str, y_col: str) -> pd.DataFrame:
    df = df.copy()
    df[x_col] = pd.to_numeric(df[x_col], errors="coerce")
    df[y_col] = pd.to_numeric(df[y_col], errors="coerce")
    return df


def points_from_xy(df: pd.DataFrame, x_col: str, y_col: str, crs: str) -> gpd.GeoDataFrame:
    """Build point geometry from projected coordinate columns.

    Rows lacking either coordinate are dropped. The coordinate columns stay in
    the frame and ``geometry`` is placed last.
    """
    df = coerce_coordinates(df, x_col, y_col)
    valid = df.dropna(subset=[x_col, y_col])
    dropped = len(df) - len(valid)
    if dropped:
        logger.warning("Removed %d rows with missing or invalid coordinates before geographic conversion.", dropped)
    geometry = [Point(xy) for xy in zip(valid[x_col], valid[y_col])]
    return gpd.GeoDataFrame(valid, geometry=geometry, crs=crs)
