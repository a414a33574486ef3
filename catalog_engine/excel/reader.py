from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reader for the product import.

The first sheet is read with its first row as header. Every cell is read as
text and blank cells become empty strings, so the normalization code only
ever sees strings. Rows that are blank in every column are dropped.

Structural failures (no sheet, zero data rows) abort the import before any
grouping happens.
"""

__all__ = [
    "StructuralImportError",
    "NoSheetError",
    "EmptySheetError",
    "SheetData",
    "read_workbook",
    "normalize_sheet",
]

HEADER_ROW_NUMBER = 1


class StructuralImportError(Exception):
    """The workbook as a whole cannot be imported."""


class NoSheetError(StructuralImportError):
    """Raised when the workbook cannot be opened or has no sheet."""


class EmptySheetError(StructuralImportError):
    """Raised when the sheet has no data row after the header."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # column label -> text
    row_numbers: list[int] = field(default_factory=list)  # 1-based sheet row of each entry in rows


def _open(source: Path | str | bytes) -> pd.ExcelFile:
    if isinstance(source, (bytes, bytearray)):
        return pd.ExcelFile(io.BytesIO(source))
    return pd.ExcelFile(source)


def read_workbook(source: Path | str | bytes) -> SheetData:
    """Read the first sheet of a workbook given as a path or raw bytes.

    Raises:
        NoSheetError: unreadable workbook or no sheet at all
        EmptySheetError: header only
    """
    try:
        xls = _open(source)
    except Exception as e:
        raise NoSheetError(f"invalid or empty workbook: {e}") from e
    if not xls.sheet_names:
        raise NoSheetError("invalid or empty workbook: no sheet found")

    sheet_name = str(xls.sheet_names[0])
    df = xls.parse(sheet_name, header=0, dtype=str, keep_default_na=False, na_values=[])
    return normalize_sheet(df, sheet_name)


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Convert a header-applied DataFrame into text rows.

    Keys keep the header labels exactly as written (resolution tolerates
    whitespace and case later); values are stripped of surrounding blanks.
    """
    columns = [str(c) for c in df.columns]
    rows: list[dict[str, Any]] = []
    row_numbers: list[int] = []
    for offset, raw in enumerate(df.itertuples(index=False, name=None)):
        row: dict[str, Any] = {}
        for col, val in zip(columns, raw, strict=False):
            if val is None or (isinstance(val, float) and pd.isna(val)):
                row[col] = ""
            else:
                row[col] = str(val).strip()
        if not any(row.values()):
            continue
        rows.append(row)
        row_numbers.append(HEADER_ROW_NUMBER + 1 + offset)

    if not rows:
        raise EmptySheetError(f"sheet '{sheet_name}' has no data rows")
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows, row_numbers=row_numbers)
