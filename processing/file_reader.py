"""
Booking file reader for CSV and Excel exports.

Reads the header row (for mapping) or the full table (for ingestion) from an
uploaded file held in memory.  Handles:
  - CSV, UTF-8 with or without a byte-order mark.
  - .xlsx, first worksheet only.

Header cells are stripped of surrounding whitespace and blank ones dropped.
Data cells are returned as stripped strings, with empty cells as "".

Errors never raise: unreadable or empty files come back with an empty
result and a message in `errors`, so the UI can show it and stay in the
no-file state.

Public API:
    read_headers(file_name, content) → HeaderReadResult
    read_rows(file_name, content) → RowReadResult
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

import openpyxl
import pandas as pd

from config.import_rules import ACCEPTED_EXTENSIONS
from processing.column_mapper import clean_headers

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class HeaderReadResult:
    """Header row of one uploaded file."""

    headers: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class RowReadResult:
    """Full table of one uploaded file, every cell as a string."""

    dataframe: pd.DataFrame = field(default_factory=pd.DataFrame)
    errors: list[str] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def read_headers(file_name: str, content: bytes) -> HeaderReadResult:
    """
    Read and clean the first row of an uploaded file.

    Args:
        file_name: Original file name; its extension selects the parser.
        content: Raw file bytes.

    Returns:
        HeaderReadResult with cleaned headers, or errors if the file could
        not be parsed or has no usable header.
    """
    result = HeaderReadResult()

    rows, error_message = _load_rows(file_name, content, max_rows=1)
    if error_message:
        result.errors.append(error_message)
        return result

    if not rows:
        result.errors.append(f"'{file_name}' is empty")
        logger.error(f"No header row in '{file_name}'")
        return result

    result.headers = clean_headers(rows[0])
    if not result.headers:
        result.errors.append(f"'{file_name}' has no column headers")
        logger.error(f"Header row of '{file_name}' is blank")
        return result

    logger.info(f"Read {len(result.headers)} headers from '{file_name}'")
    return result


def read_rows(file_name: str, content: bytes) -> RowReadResult:
    """
    Read every data row of an uploaded file into a string DataFrame.

    Column names are the stripped header cells; columns with a blank header
    are dropped.

    Args:
        file_name: Original file name; its extension selects the parser.
        content: Raw file bytes.

    Returns:
        RowReadResult with the DataFrame, or errors if parsing failed or
        the file has no data rows.
    """
    result = RowReadResult()

    rows, error_message = _load_rows(file_name, content, max_rows=None)
    if error_message:
        result.errors.append(error_message)
        return result

    if len(rows) < 2:
        result.errors.append("No rows found in CSV file.")
        logger.error(f"No data rows in '{file_name}'")
        return result

    header_row = rows[0]
    keep_positions: list[int] = []
    column_names: list[str] = []
    for position, header in enumerate(header_row):
        name = header.strip()
        if not name or name in column_names:
            continue
        keep_positions.append(position)
        column_names.append(name)

    records = [
        [row[position] if position < len(row) else "" for position in keep_positions]
        for row in rows[1:]
        if any(cell for cell in row)
    ]
    if not records:
        result.errors.append("No rows found in CSV file.")
        logger.error(f"Only blank rows below the header in '{file_name}'")
        return result

    result.dataframe = pd.DataFrame(records, columns=column_names)
    logger.info(
        f"Read {len(result.dataframe)} rows × {len(column_names)} columns "
        f"from '{file_name}'"
    )
    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _load_rows(
    file_name: str,
    content: bytes,
    max_rows: int | None,
) -> tuple[list[list[str]], str | None]:
    """
    Parse the file into rows of stripped strings.

    Returns:
        (rows, error_message) — error_message is None on success.
    """
    extension = Path(file_name).suffix.lower().lstrip(".")
    if extension not in ACCEPTED_EXTENSIONS:
        message = (
            f"Unsupported file type '.{extension}' for '{file_name}'. "
            f"Upload a {' or '.join(ACCEPTED_EXTENSIONS).upper()} file."
        )
        logger.error(message)
        return [], message

    if not content:
        return [], f"'{file_name}' is empty"

    if extension == "xlsx":
        return _load_xlsx_rows(file_name, content, max_rows)
    return _load_csv_rows(file_name, content, max_rows)


def _load_csv_rows(
    file_name: str,
    content: bytes,
    max_rows: int | None,
) -> tuple[list[list[str]], str | None]:
    # utf-8-sig strips a leading byte-order mark when present
    options = dict(
        header=None,
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
        skip_blank_lines=True,
        index_col=False,
        engine="python",
    )
    try:
        width = pd.read_csv(io.BytesIO(content), nrows=1, **options).shape[1]
        # the header row sets the width; extra cells on later rows are dropped
        frame = pd.read_csv(
            io.BytesIO(content),
            names=list(range(width)),
            nrows=max_rows,
            on_bad_lines=lambda fields: fields[:width],
            **options,
        )
    except pd.errors.EmptyDataError:
        return [], f"'{file_name}' is empty"
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as exc:
        message = (
            f"Failed to parse '{file_name}'. Please make sure it's a valid "
            f"CSV file. ({exc})"
        )
        logger.error(message)
        return [], message

    frame = frame.fillna("")
    rows = [[str(cell).strip() for cell in row] for row in frame.itertuples(index=False)]
    return rows, None


def _load_xlsx_rows(
    file_name: str,
    content: bytes,
    max_rows: int | None,
) -> tuple[list[list[str]], str | None]:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        message = (
            f"Failed to process Excel file '{file_name}'. Please ensure it's a "
            f"valid Excel file or try saving as CSV instead. ({exc})"
        )
        logger.error(message)
        return [], message

    try:
        worksheet = workbook.worksheets[0]
        rows: list[list[str]] = []
        for values in worksheet.iter_rows(values_only=True):
            cells = [_cell_to_text(value) for value in values]
            if not any(cells):
                continue
            rows.append(cells)
            if max_rows is not None and len(rows) >= max_rows:
                break
    finally:
        workbook.close()

    return rows, None


def _cell_to_text(value: object) -> str:
    """Render an Excel cell value as text; None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
