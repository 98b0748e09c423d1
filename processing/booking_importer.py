"""
Booking importer — applies a header mapping to the rows of an uploaded file.

Mirrors the rules the import endpoint enforces so a user can preview the
outcome before submitting:
  1. Only rows with status "completed" (case-insensitive) are imported.
  2. Rows missing client name, email or service date are skipped.
  3. Rows whose service date cannot be parsed are skipped.
  4. Amounts are stripped of currency symbols and separators, and kept only
     when the result is a plain number.
  5. Phone numbers are normalized to E.164 when possible and counted toward
     phone coverage; an invalid phone never skips a row.

Nothing is persisted here.

Public API:
    import_bookings(dataframe, mapping) → ImportSummary
    normalize_phone_number(phone) → str | None
    is_valid_phone(phone) → bool
    clean_amount(raw) → str | None
"""

import logging
import re
from dataclasses import dataclass, field

import pandas as pd

from config.import_rules import (
    AMOUNT_STRIP_PATTERN,
    AMOUNT_VALID_PATTERN,
    COMPLETED_STATUS,
    MAX_CLIENT_PREVIEWS,
    MAX_ERRORS_RETURNED,
    ROW_REQUIRED_FIELDS,
    VALID_PHONE_PATTERN,
)
from processing.import_validator import clean_mapping

logger = logging.getLogger(__name__)

_NON_DIGIT = re.compile(r"\D")


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class BookingRecord:
    """One row that would become a completed booking."""

    row_index: int
    client_name: str
    client_email: str
    service_date: pd.Timestamp
    client_phone: str | None = None
    amount_charged: str | None = None


@dataclass
class PhoneStats:
    phones_found: int = 0
    phones_missing: int = 0

    @property
    def coverage(self) -> int:
        """Percent of imported rows with a valid phone, rounded."""
        total = self.phones_found + self.phones_missing
        if total == 0:
            return 0
        return round(self.phones_found / total * 100)


@dataclass
class ImportSummary:
    """Outcome of applying a mapping to every row of a file."""

    processed: int = 0
    skipped: int = 0
    total_rows: int = 0
    errors: list[str] = field(default_factory=list)
    """Row-level messages, capped at MAX_ERRORS_RETURNED."""

    client_previews: list[str] = field(default_factory=list)
    phone_stats: PhoneStats = field(default_factory=PhoneStats)
    bookings: list[BookingRecord] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Processed {self.processed} bookings, skipped {self.skipped}"


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def import_bookings(dataframe: pd.DataFrame, mapping: dict[str, str]) -> ImportSummary:
    """
    Turn the rows of *dataframe* into booking records using *mapping*.

    Args:
        dataframe: String DataFrame from file_reader.read_rows().
        mapping: Logical field → column name.  Placeholder values are
            ignored.

    Returns:
        ImportSummary with counts, row-level errors, client previews, phone
        coverage and the records that would be created.

    Raises:
        ValueError: a mapped column does not exist in the DataFrame.
    """
    columns = clean_mapping(mapping)
    missing_columns = [name for name in columns.values() if name not in dataframe.columns]
    if missing_columns:
        raise ValueError(f"Mapped columns not found in file: {missing_columns}")

    summary = ImportSummary(total_rows=len(dataframe))
    all_errors: list[str] = []

    for row_index, row in dataframe.iterrows():
        values = {
            logical_field: _cell(row, column)
            for logical_field, column in columns.items()
        }
        record, error_message = _build_record(row_index, values)
        if record is None:
            all_errors.append(error_message)
            summary.skipped += 1
            continue

        if record.client_phone is not None:
            summary.phone_stats.phones_found += 1
        else:
            summary.phone_stats.phones_missing += 1
            if values.get("clientPhone"):
                logger.debug(
                    f"Invalid phone format for {record.client_name}: "
                    f"{values['clientPhone']}"
                )

        if (
            len(summary.client_previews) < MAX_CLIENT_PREVIEWS
            and record.client_name not in summary.client_previews
        ):
            summary.client_previews.append(record.client_name)

        summary.bookings.append(record)
        summary.processed += 1

    summary.errors = all_errors[:MAX_ERRORS_RETURNED]

    logger.info(
        f"Import preview: {summary.processed} processed, {summary.skipped} skipped "
        f"of {summary.total_rows} rows; phone coverage "
        f"{summary.phone_stats.phones_found}/"
        f"{summary.phone_stats.phones_found + summary.phone_stats.phones_missing}"
    )
    return summary


def normalize_phone_number(phone: str | None) -> str | None:
    """
    Normalize a phone number to "+<digits>".

    10 digits are treated as a US number without country code; 11 digits
    starting with 1 as a US number with it; any other length of at least 10
    digits as international.  Shorter inputs return None.
    """
    if not phone:
        return None
    digits = _NON_DIGIT.sub("", phone)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) >= 10:
        return f"+{digits}"
    return None


def is_valid_phone(phone: str | None) -> bool:
    return bool(phone) and VALID_PHONE_PATTERN.match(phone) is not None


def clean_amount(raw: str | None) -> str | None:
    """
    Strip an amount down to digits, "." and "-".

    Returns None when nothing numeric is left or the result is not a plain
    non-negative number (e.g. "1.2.3", "-5").
    """
    if not raw:
        return None
    cleaned = AMOUNT_STRIP_PATTERN.sub("", raw)
    if not AMOUNT_VALID_PATTERN.match(cleaned):
        return None
    return cleaned


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _cell(row: pd.Series, column: str) -> str:
    value = row[column]
    if pd.isna(value):
        return ""
    return str(value).strip()


def _build_record(
    row_index: int,
    values: dict[str, str],
) -> tuple[BookingRecord | None, str]:
    """
    Validate one row.

    Returns:
        (record, "") on success, or (None, error_message) when skipped.
    """
    status = values.get("appointmentStatus", "")
    if status.lower() != COMPLETED_STATUS:
        return None, f'Skipping row: appointment not completed (status: "{status}")'

    missing = [
        label for logical_field, label in ROW_REQUIRED_FIELDS.items()
        if not values.get(logical_field)
    ]
    if missing:
        return None, f"Skipping row: missing required fields [{', '.join(missing)}]"

    raw_date = values["serviceDate"]
    service_date = pd.to_datetime(raw_date, errors="coerce")
    if pd.isna(service_date):
        return None, f'Skipping row: invalid Service Date "{raw_date}"'

    normalized_phone = normalize_phone_number(values.get("clientPhone"))
    record = BookingRecord(
        row_index=int(row_index),
        client_name=values["clientName"],
        client_email=values["clientEmail"],
        service_date=service_date,
        client_phone=normalized_phone if is_valid_phone(normalized_phone) else None,
        amount_charged=clean_amount(values.get("amountCharged")),
    )
    return record, ""
