from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils.dataframe import dataframe_to_rows

from opendpd.datasets.base import DatasetDescriptor
from .formats import excel_safe


def write_df(wb: Workbook, sheet_name: str, df: pd.DataFrame, freeze: str = "A2") -> None:
    if sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
        wb.remove(ws)
    ws = wb.create_sheet(sheet_name)
    if df.empty:
        ws.append(["empty"])
        return
    date_cols = [c for c in df.columns if pd.api.types.is_datetime64_any_dtype(df[c])]
    df = excel_safe(df)
    df = df.astype(object)
    df = df.where(pd.notnull(df), None)
    for r in dataframe_to_rows(df, index=False, header=True):
        ws.append(r)
    ws.freeze_panes = freeze
    for col in ws.columns:
        col_letter = col[0].column_letter
        max_len = 0
        for cell in col[:50]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max(10, max_len + 2), 45)
    _format_date_columns(ws, date_cols)


def _format_date_columns(ws, date_cols: Sequence[str]) -> None:
    header = [cell.value for cell in ws[1]]
    for idx, col_name in enumerate(header, start=1):
        if col_name in date_cols:
            for row in ws.iter_rows(min_row=2, max_row=ws.max_row, min_col=idx, max_col=idx):
                cell = row[0]
                if cell.value is not None:
                    cell.number_format = "yyyy-mm-dd hh:mm:ss"


def build_data_dictionary(descriptors: List[DatasetDescriptor]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for ds in descriptors:
        base = {"dataset": ds.name, "year": ds.year, "resource_id": ds.resource_id, "title": ds.title}
        rows.append({**base, "argument": "start_date / end_date", "api_field": ds.date_field, "kind": "date"})
        for argument, spec in ds.filters.items():
            rows.append({**base, "argument": argument, "api_field": spec.field, "kind": spec.kind})
    return pd.DataFrame(rows)


def build_workbook(
    output_path: str,
    data: pd.DataFrame,
    sheet_name: str = "data",
    descriptors: Optional[List[DatasetDescriptor]] = None,
) -> str:
    wb = Workbook()
    if "Sheet" in wb.sheetnames:
        wb.remove(wb["Sheet"])

    write_df(wb, sheet_name, data)
    if descriptors:
        write_df(wb, "data_dictionary", build_data_dictionary(descriptors))

    wb.save(output_path)
    return output_path
