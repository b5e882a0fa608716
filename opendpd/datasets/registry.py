from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from opendpd.datasets.arrests.schema import DATASET as ARRESTS
from opendpd.datasets.base import DatasetDescriptor
from opendpd.datasets.charges.schema import DATASET as CHARGES
from opendpd.datasets.incidents.schema import DATASET as INCIDENTS
from opendpd.datasets.ois.schema import DATASET as OIS
from opendpd.datasets.uof import schema as uof_schema
from opendpd.errors import InvalidArgument

logger = logging.getLogger(__name__)

SINGLE_ENDPOINT: Dict[str, DatasetDescriptor] = {
    "incidents": INCIDENTS,
    "arrests": ARRESTS,
    "charges": CHARGES,
    "ois": OIS,
}
SUPPORTED_DATASETS = ("incidents", "arrests", "charges", "ois", "uof")


def get_descriptor(dataset: str, year: Optional[Any] = None) -> DatasetDescriptor:
    if not isinstance(dataset, str) or dataset not in SUPPORTED_DATASETS:
        raise InvalidArgument(f"`dataset` must be one of: {', '.join(SUPPORTED_DATASETS)}")
    if dataset == "uof":
        if year is None:
            raise InvalidArgument('`year` must be provided as a single integer when `dataset = "uof"`.')
        return uof_schema.for_year(year)
    if year is not None:
        logger.warning('`year` argument is ignored when `dataset` is not "uof".')
    return SINGLE_ENDPOINT[dataset]


def all_descriptors() -> List[DatasetDescriptor]:
    return list(SINGLE_ENDPOINT.values()) + [uof_schema.DATASETS[y] for y in sorted(uof_schema.DATASETS)]
