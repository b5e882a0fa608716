"""SoQL ``$where`` construction.

Structured filter arguments become one expression: date bounds on the
dataset's date field plus ``field IN (...)`` membership tests, joined with
``AND``. A raw ``where`` string replaces all of it.
"""
from __future__ import annotations

import logging
import math
import numbers
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from opendpd.errors import InvalidArgument

logger = logging.getLogger(__name__)

DATETIME_FMT = "%Y-%m-%dT00:00:00"
DATE_FMT = "%Y-%m-%d"
_INPUT_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")

TEXT = "text"
CODE = "code"
NUMBER = "number"


def parse_date(value: Any, arg_name: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in _INPUT_DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise InvalidArgument(f"`{arg_name}` invalid: expected 'YYYY-MM-DD' or a date, got {value!r}")


def format_number(value: Any) -> str:
    if isinstance(value, numbers.Integral):
        return str(int(value))
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise InvalidArgument(f"Cannot use {value!r} in a filter")
    if number.is_integer():
        return str(int(number))
    return repr(number)


def quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Real):
        return format_number(value)
    return quote(str(value))


def as_list(values: Any) -> List[Any]:
    if values is None:
        return []
    if isinstance(values, (str, bytes, numbers.Number)):
        return [values]
    if isinstance(values, Iterable):
        return list(values)
    return [values]


def coerce_values(values: Any, kind: str, arg_name: str) -> List[Any]:
    """Normalize filter values for one argument according to its kind.

    ``text`` accepts strings only. ``code`` accepts strings or numbers and
    sends everything as strings. ``number`` sends numbers unquoted, converting
    numeric strings when every one of them parses.
    """
    items = as_list(values)
    if kind == TEXT:
        if not all(isinstance(v, str) for v in items):
            raise InvalidArgument(f"`{arg_name}` must be a string or a list of strings.")
        return items
    if not all(isinstance(v, (str, numbers.Real)) and not isinstance(v, bool) for v in items):
        raise InvalidArgument(f"`{arg_name}` must be strings or numbers.")
    if kind == CODE:
        return [v if isinstance(v, str) else format_number(v) for v in items]
    if kind == NUMBER:
        converted: List[Any] = []
        for v in items:
            if isinstance(v, str):
                try:
                    converted.append(float(v))
                except ValueError:
                    return items
            else:
                converted.append(v)
        return converted
    raise ValueError(f"Unknown filter kind: {kind}")


def in_clause(field: str, values: Any) -> Optional[str]:
    items = as_list(values)
    if not items:
        return None
    return f"{field} IN ({', '.join(format_value(v) for v in items)})"


def date_clauses(field: str, start_date: Any = None, end_date: Any = None, with_time: bool = True) -> List[str]:
    fmt = DATETIME_FMT if with_time else DATE_FMT
    clauses: List[str] = []
    if start_date is not None:
        start = parse_date(start_date, "start_date")
        clauses.append(f"{field} >= '{start.strftime(fmt)}'")
    if end_date is not None:
        end = parse_date(end_date, "end_date") + timedelta(days=1)
        clauses.append(f"{field} < '{end.strftime(fmt)}'")
    return clauses


def combine(clauses: Iterable[Optional[str]]) -> Optional[str]:
    parts = [c for c in clauses if c]
    if not parts:
        return None
    return " AND ".join(parts)


def build_where(
    descriptor,
    start_date: Any = None,
    end_date: Any = None,
    filters: Optional[Dict[str, Any]] = None,
    where: Optional[str] = None,
) -> Optional[str]:
    supplied = {k: v for k, v in (filters or {}).items() if v is not None}
    unknown = sorted(set(supplied) - set(descriptor.filters))
    if unknown:
        raise InvalidArgument(f"Unsupported filter argument(s) for {descriptor.label}: {', '.join(unknown)}")

    if where is not None:
        if not isinstance(where, str):
            raise InvalidArgument("`where` must be a single string.")
        ignored = [name for name, val in (("start_date", start_date), ("end_date", end_date)) if val is not None]
        ignored += [name for name in descriptor.filters if name in supplied]
        if ignored:
            logger.warning("Using 'where'; ignoring other filter arguments: %s", ", ".join(ignored))
        return where

    clauses: List[Optional[str]] = list(
        date_clauses(descriptor.date_field, start_date, end_date, with_time=descriptor.date_with_time)
    )
    for name, spec in descriptor.filters.items():
        if name not in supplied:
            continue
        clauses.append(in_clause(spec.field, coerce_values(supplied[name], spec.kind, name)))
    return combine(clauses)
