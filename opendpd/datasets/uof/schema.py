from __future__ import annotations

from typing import Any, Dict

from opendpd.datasets.base import DatasetDescriptor, text
from opendpd.errors import InvalidArgument

RESOURCE_IDS = {
    2017: "tsu5-ca6k",
    2018: "33un-ry4j",
    2019: "46zb-7qgj",
    2020: "nufk-2iqn",
}

# Field names were shortened in the 2017-2019 exports.
_FIELD_NAMES = {
    "legacy": {"date": "occurred_d", "service_type": "service_ty"},
    "current": {"date": "occurred_dt", "service_type": "service_type"},
}


def _descriptor(year: int) -> DatasetDescriptor:
    names = _FIELD_NAMES["current" if year >= 2020 else "legacy"]
    return DatasetDescriptor(
        name="uof",
        resource_id=RESOURCE_IDS[year],
        title=f"Dallas Police Response to Resistance {year}",
        date_field=names["date"],
        filters={
            "force_type": text("forcetype"),
            "reason": text("uof_reason"),
            "service_type": text(names["service_type"]),
        },
        text_fields=("forcetype", "uof_reason", names["service_type"]),
        date_fields=(names["date"],),
        year=year,
    )


DATASETS: Dict[int, DatasetDescriptor] = {year: _descriptor(year) for year in RESOURCE_IDS}


def validate_year(year: Any) -> int:
    if isinstance(year, bool) or not isinstance(year, (int, float)) or not float(year).is_integer():
        raise InvalidArgument(f"`year` must be a single integer (e.g., 2020), got {year!r}")
    return int(year)


def for_year(year: Any) -> DatasetDescriptor:
    year = validate_year(year)
    if year not in DATASETS:
        first, last = min(DATASETS), max(DATASETS)
        raise InvalidArgument(f"Invalid `year` {year}. Only years {first} through {last} are supported.")
    return DATASETS[year]
