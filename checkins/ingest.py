from __future__ import annotations
import logging
from io import BytesIO
from typing import List, Dict, Any
import pandas as pd
from openpyxl import load_workbook
from .parse import parse_sheet

logger = logging.getLogger(__name__)


class SheetError(ValueError):
    """The workbook has no usable first sheet."""


# =========================

# Excel: first sheet as a matrix, merged cells expanded
# =========================
def _sheet_to_matrix_with_merged(wb_bytes: bytes, sheet_name: str) -> List[List[Any]]:
    wb = load_workbook(BytesIO(wb_bytes), read_only=False, data_only=True)
    ws = wb[sheet_name]
    merged_map = {}
    for r in ws.merged_cells.ranges:
        min_col, min_row, max_col, max_row = r.bounds
        top_val = ws.cell(min_row, min_col).value
        for rr in range(min_row, max_row + 1):
            for cc in range(min_col, max_col + 1):
                merged_map[(rr, cc)] = top_val

    rows = []
    for r in range(1, ws.max_row + 1):
        row_vals = []
        for c in range(1, ws.max_column + 1):
            v = ws.cell(r, c).value
            if (r, c) in merged_map and (v is None or str(v).strip() == ""):
                v = merged_map[(r, c)]
            row_vals.append(v)
        rows.append(row_vals)
    return rows


def _frame_to_matrix(df: pd.DataFrame) -> List[List[Any]]:
    # NaN from pandas means an empty cell
    out = []
    for row in df.itertuples(index=False, name=None):
        out.append([None if pd.isna(v) else v for v in row])
    return out


def _is_blank_row(row: List[Any]) -> bool:
    return not any(v is not None and (not isinstance(v, str) or v != "") for v in row)


def load_first_sheet(data: bytes, file_name: str = "") -> List[List[Any]]:
    """
    Reads the first sheet of a workbook as rows of raw cells (no header
    assumed). Fully blank rows are dropped.
    Raises SheetError when there is no sheet or no rows.
    """
    xls = pd.ExcelFile(BytesIO(data))
    if not xls.sheet_names:
        raise SheetError("No sheets found in workbook.")
    sheet = xls.sheet_names[0]

    if file_name.lower().endswith((".xlsx", ".xlsm")) or not file_name:
        try:
            matrix = _sheet_to_matrix_with_merged(data, sheet_name=sheet)
        except (KeyError, ValueError, OSError):
            logger.warning("openpyxl could not read %r, falling back to pandas", sheet)
            matrix = _frame_to_matrix(pd.read_excel(xls, sheet_name=sheet, header=None))
    else:
        # fallback
        matrix = _frame_to_matrix(pd.read_excel(xls, sheet_name=sheet, header=None))

    rows = [row for row in matrix if not _is_blank_row(row)]
    if not rows:
        raise SheetError("No rows detected in sheet.")
    logger.info("Read %d rows from sheet %r of %s", len(rows), sheet, file_name or "<upload>")
    return rows


def load_records(data: bytes, file_name: str = "") -> List[Dict[str, Any]]:
    # workbook bytes -> student records
    rows = load_first_sheet(data, file_name)
    records = parse_sheet(rows)
    if not records:
        logger.warning("No student records found in %s", file_name or "<upload>")
    return records
