"""
Booking ingestion rules.

Constants applied when rows of an uploaded file are turned into bookings:
which status counts as completed, how phone numbers are validated, and how
much of the error/preview output is kept.
"""

import re

# File types accepted by the uploader (lowercase, without the dot).
ACCEPTED_EXTENSIONS: list[str] = ["csv", "xlsx"]

# Only rows whose status equals this (case-insensitive) become bookings.
COMPLETED_STATUS: str = "completed"

# Fields whose absence on a row causes it to be skipped, with the label used
# in the row-level error message.
ROW_REQUIRED_FIELDS: dict[str, str] = {
    "clientName": "Client Name",
    "clientEmail": "Client Email",
    "serviceDate": "Service Date",
}

# E.164: leading "+", no leading zero, at most 15 digits.
VALID_PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

# Characters stripped from a raw amount before it is stored.
AMOUNT_STRIP_PATTERN = re.compile(r"[^0-9.\-]+")

# An amount is only stored when the cleaned string looks like this.
AMOUNT_VALID_PATTERN = re.compile(r"^[0-9]+\.?[0-9]*$")

# Limits on what the summary carries back to the UI.
MAX_ERRORS_RETURNED: int = 10
MAX_CLIENT_PREVIEWS: int = 3
