"""Post-fetch cleaning of open-data tables.

Text normalization (lowercase, trim, collapse whitespace), date parsing into
time-zone-aware timestamps, and remapping of noisy division / council
district labels onto fixed categories.
"""
from __future__ import annotations

import logging
import math
import numbers
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import numpy as np
import pandas as pd

from opendpd.config import DEFAULT_TZ
from opendpd.datasets.registry import get_descriptor
from opendpd.errors import InvalidArgument

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)

DIVISIONS = (
    "central",
    "northeast",
    "northwest",
    "southcentral",
    "southeast",
    "southwest",
    "northcentral",
)
DIVISION_VARIANTS = {
    "central patrol div": "central",
    "south west": "southwest",
    "north east": "northeast",
    "north west": "northwest",
    "south central": "southcentral",
    "south east": "southeast",
    "north central": "northcentral",
}

DISTRICTS = tuple(str(n) for n in range(1, 15))
_DISTRICT_SUFFIX = re.compile(r"(?:^|\s|_)(\d{1,2})$")
_WHITESPACE = re.compile(r"\s+")


def squish_text(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return _WHITESPACE.sub(" ", value.lower().strip())


def _as_text(value: Any) -> Optional[str]:
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        number = float(value)
        if math.isnan(number):
            return None
        if number.is_integer():
            return str(int(number))
    return str(value)


def _is_text_column(series: pd.Series) -> bool:
    if isinstance(series.dtype, pd.StringDtype):
        return True
    if series.dtype != object:
        return False
    return bool(series.dropna().map(lambda v: isinstance(v, str)).all())


def _require_frame(data: Any) -> None:
    if not isinstance(data, pd.DataFrame):
        raise InvalidArgument("`data` must be a pandas DataFrame.")


def _check_fields(fields: Optional[Iterable[str]], arg_name: str) -> Optional[List[str]]:
    if fields is None:
        return None
    names = [fields] if isinstance(fields, str) else list(fields)
    if not all(isinstance(n, str) for n in names):
        raise InvalidArgument(f"`{arg_name}` must be a list of column names or None.")
    return names


def _present(df: pd.DataFrame, fields: List[str], arg_name: str) -> List[str]:
    present = [f for f in fields if f in df.columns]
    missing = [f for f in fields if f not in df.columns]
    if missing:
        logger.warning("Specified `%s` not found and skipped: %s", arg_name, ", ".join(missing))
    return present


def validate_tz(tz: Any) -> str:
    if not isinstance(tz, str) or not tz:
        raise InvalidArgument("`tz` must be a valid IANA time zone name.")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidArgument(f"`tz` must be a valid IANA time zone name, got {tz!r}") from exc
    return tz


def clean_text_fields(df: pd.DataFrame, fields: Sequence[str]) -> pd.DataFrame:
    out = df.copy()
    present = _present(out, list(fields), "text_fields")
    text_cols = [c for c in present if _is_text_column(out[c])]
    skipped = [c for c in present if c not in text_cols]
    if skipped:
        logger.warning("Columns in `text_fields` are not text and were skipped: %s", ", ".join(skipped))
    if not text_cols:
        logger.info("No specified text fields found; skipping text cleaning.")
        return out
    logger.info("Applying text cleaning (lower, trim, squish) to columns: %s", ", ".join(text_cols))
    for col in text_cols:
        out[col] = out[col].str.lower().str.strip().str.replace(r"\s+", " ", regex=True)
    return out


def _localize(series: pd.Series, tz: str) -> pd.Series:
    # Wall times repeated when clocks fall back resolve to the first (daylight) occurrence.
    return series.dt.tz_localize(tz, ambiguous=np.ones(len(series), dtype=bool), nonexistent="NaT")


def parse_dates(series: pd.Series, tz: str = DEFAULT_TZ) -> pd.Series:
    """Parse a column against ``DATE_FORMATS`` in order; failures become NaT."""
    if pd.api.types.is_datetime64_any_dtype(series):
        if series.dt.tz is None:
            return _localize(series, tz)
        return series.dt.tz_convert(tz)

    text = series.map(lambda v: v.strip() if isinstance(v, str) else None)
    parsed = pd.Series(pd.NaT, index=series.index, dtype="datetime64[ns]")
    for fmt in DATE_FORMATS:
        pending = parsed.isna() & text.notna()
        if not pending.any():
            break
        attempt = pd.to_datetime(text[pending], format=fmt, errors="coerce")
        parsed.loc[pending] = attempt
    return _localize(parsed, tz)


def parse_date_fields(df: pd.DataFrame, fields: Sequence[str], tz: str = DEFAULT_TZ) -> pd.DataFrame:
    out = df.copy()
    present = _present(out, list(fields), "date_fields")
    if not present:
        logger.info("No specified date fields found; skipping date parsing.")
        return out
    logger.info("Converting date columns to timestamps (tz=%s): %s", tz, ", ".join(present))
    for col in present:
        before = out[col]
        out[col] = parse_dates(before, tz)
        failed = int((out[col].isna() & before.map(lambda v: isinstance(v, str) and v.strip() != "")).sum())
        if failed:
            logger.warning("%d value(s) in column '%s' failed to parse as dates/times.", failed, col)
    return out


def clean_data(
    data: pd.DataFrame,
    text_fields: Optional[Iterable[str]] = None,
    date_fields: Optional[Iterable[str]] = None,
    tz: str = DEFAULT_TZ,
) -> pd.DataFrame:
    """Normalize ``text_fields`` and parse ``date_fields``; ``None`` skips a step."""
    _require_frame(data)
    text_names = _check_fields(text_fields, "text_fields")
    date_names = _check_fields(date_fields, "date_fields")
    tz = validate_tz(tz)
    if data.empty:
        logger.info("Input data has 0 rows, returning unmodified.")
        return data

    out = data
    if text_names is not None:
        out = clean_text_fields(out, text_names)
    if date_names is not None:
        out = parse_date_fields(out, date_names, tz)
    return out


def clean_dataset(data: pd.DataFrame, dataset: str, year: Optional[int] = None, tz: str = DEFAULT_TZ) -> pd.DataFrame:
    descriptor = get_descriptor(dataset, year)
    return clean_data(data, descriptor.text_fields, descriptor.date_fields, tz=tz)


def _normalize_column(series: pd.Series) -> pd.Series:
    return series.astype(object).map(lambda v: squish_text(_as_text(v)))


def _count_new_nulls(normalized: pd.Series, standardized: pd.Series) -> int:
    had_value = normalized.map(lambda v: isinstance(v, str) and v != "")
    return int((standardized.isna() & had_value).sum())


def _standardize(
    data: pd.DataFrame,
    col: str,
    levels: Sequence[str],
    resolve,
    what: str,
) -> pd.DataFrame:
    _require_frame(data)
    if not isinstance(col, str):
        raise InvalidArgument("Column name must be given as a string.")
    if col not in data.columns:
        logger.warning("Column '%s' not found in data. Skipping standardization.", col)
        return data

    logger.info("Standardizing column: '%s'", col)
    normalized = _normalize_column(data[col])
    standardized = normalized.map(lambda v: resolve(v) if isinstance(v, str) else None)
    unmapped = _count_new_nulls(normalized, standardized)
    if unmapped:
        logger.warning("%d value(s) in column '%s' %s and became null.", unmapped, col, what)

    out = data.copy()
    out[col] = pd.Categorical(standardized, categories=list(levels))
    return out


_DIVISION_LOOKUP: Dict[str, str] = {**{d: d for d in DIVISIONS}, **DIVISION_VARIANTS}


def _resolve_division(value: str) -> Optional[str]:
    return _DIVISION_LOOKUP.get(value)


def _resolve_district(value: str) -> Optional[str]:
    if value in DISTRICTS:
        return value
    match = _DISTRICT_SUFFIX.search(value)
    if match:
        number = str(int(match.group(1)))
        if number in DISTRICTS:
            return number
    return None


def standardize_division(data: pd.DataFrame, division_col: str = "division") -> pd.DataFrame:
    """Map police division labels onto the seven standard divisions.

    Values such as ``"North West"`` or ``"CENTRAL PATROL DIV"`` resolve to
    ``"northwest"`` / ``"central"``; anything else becomes null and the
    number of such values is logged as a warning. The column comes back as a
    categorical with the seven divisions as its categories.
    """
    return _standardize(data, division_col, DIVISIONS, _resolve_division, "did not match standard divisions")


def standardize_district(data: pd.DataFrame, district_col: str = "district") -> pd.DataFrame:
    """Map council district labels onto ``"1"`` .. ``"14"``.

    Bare numbers pass through; a trailing one- or two-digit number is taken
    from labels like ``"district 5"`` or ``"council_district 12"``.
    """
    return _standardize(
        data,
        district_col,
        DISTRICTS,
        _resolve_district,
        "could not be mapped to a standard district (1-14)",
    )
