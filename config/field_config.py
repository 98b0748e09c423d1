"""
Logical field configuration for booking imports.

Defines the target fields the platform understands, which of them are
required, the order auto-mapping visits them in, and the synonym phrases
recognised for each one.

Used by processing/header_matcher.py, processing/column_mapper.py and
processing/import_validator.py.
"""

# ---------------------------------------------------------------------------
# Logical fields, in declaration order.
# ---------------------------------------------------------------------------
LOGICAL_FIELDS: list[str] = [
    "clientName",
    "clientEmail",
    "clientPhone",
    "serviceDate",
    "amountCharged",
    "appointmentStatus",
]

# Required fields in the order the auto-mapper assigns them.
REQUIRED_FIELDS: list[str] = [
    "clientName",
    "clientEmail",
    "serviceDate",
    "appointmentStatus",
]

# Optional fields, only considered after every required field had its pass.
OPTIONAL_FIELDS: list[str] = [
    "clientPhone",
    "amountCharged",
]

# ---------------------------------------------------------------------------
# Synonyms: logical field → header phrasings that refer to it.
# Compared after normalization, so "client_name" and "client name" are the
# same phrase; both spellings are kept to mirror common export formats.
# ---------------------------------------------------------------------------
FIELD_SYNONYMS: dict[str, list[str]] = {
    "clientName": [
        "client name",
        "client_name",
        "full name",
        "full_name",
        "name",
        "customer name",
        "customer_name",
    ],
    "clientEmail": [
        "client email",
        "client_email",
        "email",
        "email address",
        "email_address",
        "customer email",
        "customer_email",
    ],
    "clientPhone": [
        "client phone",
        "client_phone",
        "phone",
        "phone number",
        "phone_number",
        "mobile",
        "mobile number",
        "mobile_number",
        "customer phone",
        "customer_phone",
    ],
    "serviceDate": [
        "service date",
        "service_date",
        "date",
        "appointment date",
        "appointment_date",
        "booking date",
        "booking_date",
    ],
    "amountCharged": [
        "amount",
        "amount charged",
        "amount_charged",
        "total",
        "price",
        "cost",
        "fee",
        "amount paid",
        "amount_paid",
    ],
    "appointmentStatus": [
        "status",
        "appointment status",
        "appointment_status",
        "booking status",
        "booking_status",
        "completion status",
        "completion_status",
    ],
}

# Display labels shown next to each mapping dropdown.
FIELD_LABELS: dict[str, str] = {
    "clientName": "Client Name",
    "clientEmail": "Client Email",
    "clientPhone": "Client Phone",
    "serviceDate": "Service Date",
    "amountCharged": "Amount Charged",
    "appointmentStatus": "Appointment Status",
}

# ---------------------------------------------------------------------------
# Dropdown sentinels. Any of these (or an empty value) means "not mapped".
# ---------------------------------------------------------------------------
SELECT_PLACEHOLDER: str = "__select_placeholder__"
NOT_MAPPED: str = "__not_mapped__"
CLEAR_SELECTION: str = "__clear_selection__"

CLEARING_VALUES: set[str] = {"", SELECT_PLACEHOLDER, NOT_MAPPED, CLEAR_SELECTION}
