"""
Import validator — decides whether a mapping may be submitted.

The upload action is only enabled when every required field
(clientName, clientEmail, serviceDate, appointmentStatus) has a real header.
Dropdown sentinels and empty strings count as "not mapped".

Public API:
    can_submit(mapping) → bool
    missing_required_fields(mapping) → list[str]
    clean_mapping(mapping) → dict[str, str]
"""

import logging

from config.field_config import CLEARING_VALUES, LOGICAL_FIELDS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)


def clean_mapping(mapping: dict[str, str | None]) -> dict[str, str]:
    """
    Drop unmapped entries so only real field → header pairs remain.

    Keys are emitted in declaration order; this is the JSON body sent to
    the import endpoint.
    """
    return {
        logical_field: mapping[logical_field]
        for logical_field in LOGICAL_FIELDS
        if _is_mapped(mapping.get(logical_field))
    }


def missing_required_fields(mapping: dict[str, str | None]) -> list[str]:
    """Required fields without a header, in declared order."""
    return [
        logical_field for logical_field in REQUIRED_FIELDS
        if not _is_mapped(mapping.get(logical_field))
    ]


def can_submit(mapping: dict[str, str | None]) -> bool:
    """True iff every required field has a non-empty mapped header."""
    missing = missing_required_fields(mapping)
    if missing:
        logger.debug(f"Submit blocked, missing required mappings: {missing}")
        return False
    return True


def _is_mapped(value: str | None) -> bool:
    return value is not None and value.strip() != "" and value not in CLEARING_VALUES
