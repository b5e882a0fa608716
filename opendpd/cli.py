from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from opendpd import config as config_mod
from opendpd.clean import clean_dataset, standardize_district, standardize_division
from opendpd.datasets.arrests.fetch import get_arrests
from opendpd.datasets.charges.fetch import get_charges
from opendpd.datasets.incidents.fetch import get_incidents
from opendpd.datasets.ois.fetch import get_ois
from opendpd.datasets.registry import SUPPORTED_DATASETS, all_descriptors, get_descriptor
from opendpd.datasets.uof.fetch import get_uof
from opendpd.errors import InvalidArgument, OpenDPDError
from opendpd.excel.build_workbook import build_data_dictionary
from opendpd.fetch import UNBOUNDED
from opendpd.io.output import write_table
from opendpd.values import DEFAULT_MAX_VALUES, list_distinct_values


logger = logging.getLogger("opendpd")

FETCHERS: Dict[str, Callable[..., pd.DataFrame]] = {
    "incidents": get_incidents,
    "arrests": get_arrests,
    "charges": get_charges,
    "ois": get_ois,
    "uof": get_uof,
}


def _setup_logging() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")


def _parse_limit(text: str):
    if text.lower() in ("all", "inf", "none"):
        return UNBOUNDED
    try:
        return int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"limit must be an integer or 'all', got {text!r}")


def _parse_pairs(pairs: Optional[List[str]], flag: str) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise InvalidArgument(f"{flag} expects NAME=VALUE, got {pair!r}")
        name, value = pair.split("=", 1)
        out.setdefault(name.strip(), []).append(value)
    return out


def fetch(args: argparse.Namespace, cfg: Dict[str, Any]) -> pd.DataFrame:
    descriptor = get_descriptor(args.dataset, args.year)
    kwargs: Dict[str, Any] = dict(_parse_pairs(args.filter, "--filter"))
    unknown = sorted(set(kwargs) - set(descriptor.filters))
    if unknown:
        raise InvalidArgument(
            f"Unknown filter(s) for {descriptor.label}: {', '.join(unknown)}. "
            f"Available: {', '.join(descriptor.filters)}"
        )
    for key, values in _parse_pairs(args.param, "--param").items():
        kwargs[key if key.startswith("$") else f"${key}"] = values[-1]
    if args.order:
        kwargs["$order"] = args.order
    if args.dataset == "uof":
        kwargs["year"] = args.year
    if args.convert_geo:
        if args.dataset != "incidents":
            raise InvalidArgument("--convert-geo is only available for incidents")
        kwargs["convert_geo"] = True

    df = FETCHERS[args.dataset](
        start_date=args.start_date,
        end_date=args.end_date,
        where=args.where,
        select=args.select,
        limit=args.limit,
        cfg=cfg,
        **kwargs,
    )
    if args.clean and not df.empty:
        df = clean_dataset(df, args.dataset, args.year, tz=cfg["cleaning"]["tz"])
    if args.standardize_division:
        df = standardize_division(df, args.standardize_division)
    if args.standardize_district:
        df = standardize_district(df, args.standardize_district)

    if args.out:
        write_table(df, args.out, descriptors=[descriptor])
    else:
        print(df.to_string(max_rows=20))
    return df


def values(args: argparse.Namespace, cfg: Dict[str, Any]) -> Optional[List[Any]]:
    found = list_distinct_values(args.field, dataset=args.dataset, year=args.year, max_values=args.max_values, cfg=cfg)
    for value in found or []:
        print(value)
    return found


def datasets(args: argparse.Namespace, cfg: Dict[str, Any]) -> pd.DataFrame:
    table = build_data_dictionary(all_descriptors())
    if args.out:
        write_table(table, args.out)
    else:
        print(table.to_string(index=False))
    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opendpd", description="Dallas Police open-data client.")
    parser.add_argument("--config", help="Path to config YAML")
    sub = parser.add_subparsers(dest="cmd", required=True)

    fetch_cmd = sub.add_parser("fetch", help="Fetch rows from one dataset.")
    fetch_cmd.add_argument("dataset", choices=SUPPORTED_DATASETS)
    fetch_cmd.add_argument("--year", type=int, help="Use-of-force year (2017-2020)")
    fetch_cmd.add_argument("--start-date", help="Inclusive start date, YYYY-MM-DD")
    fetch_cmd.add_argument("--end-date", help="Inclusive end date, YYYY-MM-DD")
    fetch_cmd.add_argument("--filter", action="append", metavar="NAME=VALUE", help="Dataset filter; repeat for several values")
    fetch_cmd.add_argument("--where", help="Raw SoQL WHERE clause; overrides other filters")
    fetch_cmd.add_argument("--select", nargs="+", help="Columns to retrieve")
    fetch_cmd.add_argument("--limit", type=_parse_limit, default=1000, help="Maximum rows, or 'all'")
    fetch_cmd.add_argument("--order", help="SoQL $order clause")
    fetch_cmd.add_argument("--param", action="append", metavar="KEY=VALUE", help="Extra SoQL query parameter")
    fetch_cmd.add_argument("--convert-geo", action="store_true", help="Build EPSG:2276 point geometry (incidents)")
    fetch_cmd.add_argument("--clean", action="store_true", help="Apply the dataset's default text/date cleaning")
    fetch_cmd.add_argument("--standardize-division", metavar="COLUMN")
    fetch_cmd.add_argument("--standardize-district", metavar="COLUMN")
    fetch_cmd.add_argument("--out", help="Output file (.csv, .json, .parquet, .xlsx)")

    values_cmd = sub.add_parser("values", help="List distinct values of a field.")
    values_cmd.add_argument("field")
    values_cmd.add_argument("--dataset", default="incidents", choices=SUPPORTED_DATASETS)
    values_cmd.add_argument("--year", type=int)
    values_cmd.add_argument("--max-values", type=int, default=DEFAULT_MAX_VALUES)

    datasets_cmd = sub.add_parser("datasets", help="Show dataset endpoints and filter fields.")
    datasets_cmd.add_argument("--out", help="Output file (.csv, .json, .parquet, .xlsx)")
    return parser


COMMANDS = {"fetch": fetch, "values": values, "datasets": datasets}


def main(argv: Optional[List[str]] = None) -> int:
    _setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = config_mod.load_config(args.config)
        COMMANDS[args.cmd](args, cfg)
    except OpenDPDError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
