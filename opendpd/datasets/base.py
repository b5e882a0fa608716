from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from opendpd.query import CODE, NUMBER, TEXT


@dataclass(frozen=True)
class FilterField:
    field: str
    kind: str = TEXT


@dataclass(frozen=True)
class DatasetDescriptor:
    name: str
    resource_id: str
    title: str
    date_field: str
    date_with_time: bool = True
    filters: Dict[str, FilterField] = field(default_factory=dict)
    text_fields: Tuple[str, ...] = ()
    date_fields: Tuple[str, ...] = ()
    geo_columns: Optional[Tuple[str, str]] = None
    crs: Optional[str] = None
    year: Optional[int] = None

    @property
    def label(self) -> str:
        if self.year is not None:
            return f"{self.name} {self.year}"
        return self.name


def text(field_name: str) -> FilterField:
    return FilterField(field_name, TEXT)


def code(field_name: str) -> FilterField:
    return FilterField(field_name, CODE)


def number(field_name: str) -> FilterField:
    return FilterField(field_name, NUMBER)
