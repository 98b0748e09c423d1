"""
Column mapper — proposes a mapping from file headers to logical fields.

Greedy, priority-ordered assignment:
  1. Blank headers are dropped from the candidate pool.
  2. Required fields (clientName, clientEmail, serviceDate,
     appointmentStatus) each take the first unused header, in file order,
     that matches one of their synonyms.
  3. Optional fields (clientPhone, amountCharged) do the same among the
     headers still unused.
  4. Every header left over is an extra field, in file order.

A header can satisfy at most one field.  The function is pure: the same
header list always yields the same result.

Public API:
    auto_map(headers) → AutoMapResult
    clean_headers(headers) → list[str]
    derive_extra_fields(headers, mapping) → list[str]
"""

import logging
from dataclasses import dataclass, field

from config.field_config import FIELD_SYNONYMS, OPTIONAL_FIELDS, REQUIRED_FIELDS
from processing.header_matcher import is_blank_header, matches_field

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class AutoMapResult:
    """Result of auto-mapping one file's header row."""

    headers: list[str] = field(default_factory=list)
    """Candidate headers after blank ones were removed, in file order."""

    mapping: dict[str, str] = field(default_factory=dict)
    """logical field → header, only for fields that found a match."""

    extra_fields: list[str] = field(default_factory=list)
    """Headers not assigned to any field, in file order."""

    all_required_mapped: bool = False

    all_fields_mapped: bool = False
    """True when every required AND optional field found a header."""


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def auto_map(headers: list[str]) -> AutoMapResult:
    """
    Map raw file headers to logical fields using the synonym tables.

    Args:
        headers: Header row of the uploaded file, in file order.

    Returns:
        AutoMapResult with the proposed mapping, leftover headers and
        completeness flags.
    """
    candidates = clean_headers(headers)
    used_headers: set[str] = set()
    mapping: dict[str, str] = {}

    all_required_mapped = True
    for logical_field in REQUIRED_FIELDS:
        matched = _first_match(logical_field, candidates, used_headers)
        if matched is None:
            all_required_mapped = False
            logger.debug(f"No header found for required field '{logical_field}'")
            continue
        mapping[logical_field] = matched
        used_headers.add(matched)
        logger.debug(f"Mapped '{matched}' → {logical_field}")

    for logical_field in OPTIONAL_FIELDS:
        matched = _first_match(logical_field, candidates, used_headers)
        if matched is None:
            continue
        mapping[logical_field] = matched
        used_headers.add(matched)
        logger.debug(f"Mapped '{matched}' → {logical_field} (optional)")

    extra_fields = [header for header in candidates if header not in used_headers]
    all_fields_mapped = all(
        logical_field in mapping
        for logical_field in REQUIRED_FIELDS + OPTIONAL_FIELDS
    )

    logger.info(
        f"Auto-mapping complete: {len(mapping)} fields mapped, "
        f"{len(extra_fields)} extra columns, "
        f"all_required_mapped={all_required_mapped}"
    )

    return AutoMapResult(
        headers=candidates,
        mapping=mapping,
        extra_fields=extra_fields,
        all_required_mapped=all_required_mapped,
        all_fields_mapped=all_fields_mapped,
    )


def clean_headers(headers: list[str]) -> list[str]:
    """
    Strip surrounding whitespace and drop blank headers, keeping order.

    Repeated header names collapse to their first occurrence: rows are keyed
    by header name downstream, so two identical names are one column.
    """
    cleaned: list[str] = []
    for header in headers:
        if is_blank_header(header):
            continue
        stripped = str(header).strip()
        if stripped not in cleaned:
            cleaned.append(stripped)
    return cleaned


def derive_extra_fields(headers: list[str], mapping: dict[str, str]) -> list[str]:
    """
    Recompute the extra fields from scratch.

    Args:
        headers: Candidate headers (already cleaned), in file order.
        mapping: Current logical field → header mapping.

    Returns:
        Headers not used by any field, in file order.
    """
    mapped = {header for header in mapping.values() if header}
    return [header for header in headers if header not in mapped]


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _first_match(
    logical_field: str,
    candidates: list[str],
    used_headers: set[str],
) -> str | None:
    """Return the first unused candidate matching the field's synonyms."""
    synonyms = FIELD_SYNONYMS[logical_field]
    for header in candidates:
        if header in used_headers:
            continue
        if matches_field(header, synonyms):
            return header
    return None
