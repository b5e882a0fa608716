from opendpd.clean import clean_data, clean_dataset, standardize_district, standardize_division
from opendpd.datasets.arrests.fetch import get_arrests
from opendpd.datasets.arrests.parse import clean_arrests_data
from opendpd.datasets.charges.fetch import get_charges
from opendpd.datasets.incidents.fetch import get_incidents
from opendpd.datasets.incidents.parse import clean_incidents_data
from opendpd.datasets.ois.fetch import get_ois
from opendpd.datasets.uof.fetch import get_uof
from opendpd.errors import DecodeFailed, InvalidArgument, OpenDPDError, RequestFailed, UnknownField
from opendpd.fetch import UNBOUNDED
from opendpd.values import list_distinct_values

__all__ = [
    "UNBOUNDED",
    "DecodeFailed",
    "InvalidArgument",
    "OpenDPDError",
    "RequestFailed",
    "UnknownField",
    "clean_arrests_data",
    "clean_data",
    "clean_dataset",
    "clean_incidents_data",
    "get_arrests",
    "get_charges",
    "get_incidents",
    "get_ois",
    "get_uof",
    "list_distinct_values",
    "standardize_district",
    "standardize_division",
]
