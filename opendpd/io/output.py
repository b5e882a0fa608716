from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from opendpd.datasets.base import DatasetDescriptor
from opendpd.errors import InvalidArgument
from opendpd.excel.build_workbook import build_workbook
from opendpd.excel.formats import geometry_to_wkt

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".json", ".parquet", ".xlsx")


def ensure_parent(path: str) -> str:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return path


def _plain(df: pd.DataFrame) -> pd.DataFrame:
    if "geometry" not in df.columns:
        return df
    out = pd.DataFrame(df).copy()
    out["geometry"] = geometry_to_wkt(out["geometry"])
    return out


def write_table(df: pd.DataFrame, out_path: str, descriptors: Optional[List[DatasetDescriptor]] = None) -> str:
    suffix = Path(out_path).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise InvalidArgument(f"Unsupported output format '{suffix}'; use one of {', '.join(SUPPORTED_SUFFIXES)}")
    ensure_parent(out_path)
    if suffix == ".csv":
        _plain(df).to_csv(out_path, index=False)
    elif suffix == ".json":
        _plain(df).to_json(out_path, orient="records", date_format="iso")
    elif suffix == ".parquet":
        df.to_parquet(out_path, index=False)
    else:
        build_workbook(out_path, df, descriptors=descriptors)
    logger.info("Wrote %d rows to %s", len(df), out_path)
    return out_path
