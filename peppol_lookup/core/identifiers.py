"""Company identifier normalisation and input file reading."""

import csv
import logging
import re
from pathlib import Path
from typing import Any, Optional

from openpyxl import load_workbook

logger = logging.getLogger(__name__)

# Belgian enterprise numbers, as written in the wild
EXAMPLE_IDENTIFIERS = [
    "0769377373",
    "0772302320",
    "12345647125",
    "0475.384.429",
    "0438.722.387",
    "BE 0635.581.315",
    "0687.702.977",
    "BE 0407.703.668",
]

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_identifier(value: str) -> str:
    """Strip everything except digits, e.g. ``BE 0635.581.315`` -> ``0635581315``."""
    return _NON_DIGITS.sub("", value)


def read_identifiers(file_path: str, column: Optional[str] = None) -> list[str]:
    """Read company identifiers from a text, CSV or Excel file.

    Text files hold one identifier per line; blank lines and ``#`` comments
    are skipped. For CSV and Excel files the identifiers are taken from the
    named column (matched case-insensitively against the header row) or from
    the first column. Without a named column, a first row that holds no digits
    is treated as a header.

    Args:
        file_path: Path to the input file.
        column: Header of the column holding identifiers.

    Returns:
        Identifiers in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the format is unsupported or the column is missing.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix in (".txt", ""):
        with open(path, "r", encoding="utf-8") as f:
            identifiers = [
                line.strip() for line in f
                if line.strip() and not line.strip().startswith("#")
            ]
    elif suffix == ".csv":
        with open(path, "r", newline="", encoding="utf-8-sig") as f:
            identifiers = _from_rows(list(csv.reader(f)), column)
    elif suffix in (".xlsx", ".xlsm"):
        workbook = load_workbook(filename=path, read_only=True, data_only=True)
        try:
            rows = list(workbook.worksheets[0].iter_rows(values_only=True))
        finally:
            workbook.close()
        identifiers = _from_rows(rows, column)
    else:
        raise ValueError(f"Invalid file format: {path.suffix}. Expected .txt, .csv, .xlsx or .xlsm")

    logger.info(f"Read {len(identifiers)} identifiers from: {file_path}")
    return identifiers


def _from_rows(rows: list[Any], column: Optional[str]) -> list[str]:
    if not rows:
        return []

    col_idx = 0
    start = 0
    if column:
        headers = [str(cell).strip().lower() if cell is not None else "" for cell in rows[0]]
        if column.strip().lower() not in headers:
            raise ValueError(f"Column '{column}' not found in header row")
        col_idx = headers.index(column.strip().lower())
        start = 1
    elif rows[0] and not normalize_identifier(_cell_text(rows[0][0])):
        start = 1

    identifiers = []
    for row in rows[start:]:
        if col_idx >= len(row):
            continue
        text = _cell_text(row[col_idx])
        if text:
            identifiers.append(text)
    return identifiers


def _cell_text(cell: Any) -> str:
    if cell is None:
        return ""
    # Numeric Excel cells come back as floats (1234.0)
    if isinstance(cell, float) and cell.is_integer():
        cell = int(cell)
    return str(cell).strip()
