"""
Mapping editor — applies a user's manual change to the header mapping.

Rules for set_mapping(state, field, header):
  - Clearing (None, "" or a dropdown sentinel) always succeeds.  The header
    the field held goes back to the extra fields unless another field still
    claims it.
  - Choosing a header already mapped to a DIFFERENT field raises FieldError
    naming that field.  Nothing is swapped or overwritten.
  - Choosing a header that was extra removes it from the extra fields; the
    field's previous header (if any) is returned to them.

MappingState is immutable and hashable: every successful edit returns a new
state, so a rejected edit leaves the caller's state exactly as it was.

Public API:
    MappingState, FieldError
    initial_state(auto_map_result) → MappingState
    set_mapping(state, field, header) → MappingState
    field_label(field) → str
"""

import logging
import re
from dataclasses import dataclass

from config.field_config import CLEARING_VALUES, LOGICAL_FIELDS
from processing.column_mapper import AutoMapResult

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

class FieldError(ValueError):
    """A mapping edit was rejected; carries the field it was made on."""

    def __init__(self, field: str, message: str, conflicting_field: str | None = None):
        super().__init__(message)
        self.field = field
        self.message = message
        self.conflicting_field = conflicting_field


@dataclass(frozen=True)
class MappingState:
    """Header mapping for one upload session plus the derived extra fields."""

    headers: tuple[str, ...] = ()
    assignments: tuple[tuple[str, str], ...] = ()
    extra_fields: tuple[str, ...] = ()

    @property
    def mapping(self) -> dict[str, str]:
        """Logical field → header, as a fresh dict the caller may change."""
        return dict(self.assignments)

    def mapped_field_for(self, header: str) -> str | None:
        """Return the logical field currently holding *header*, if any."""
        for logical_field, mapped_header in self.assignments:
            if mapped_header == header:
                return logical_field
        return None


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def initial_state(result: AutoMapResult) -> MappingState:
    """Build the editable state from an auto-mapping result."""
    return MappingState(
        headers=tuple(result.headers),
        assignments=tuple(result.mapping.items()),
        extra_fields=tuple(result.extra_fields),
    )


def set_mapping(state: MappingState, field: str, header: str | None) -> MappingState:
    """
    Assign *header* to *field*, or clear the field.

    Args:
        state: Current mapping state (not modified).
        field: Logical field name, e.g. "clientPhone".
        header: Header to assign; None, "" or a dropdown sentinel clears.

    Returns:
        The new MappingState.

    Raises:
        FieldError: the field is unknown, the header is not in the file, or
            the header is already mapped to another field.
    """
    if field not in LOGICAL_FIELDS:
        raise FieldError(field, f"Unknown field '{field}'")

    new_value = None if header is None or header in CLEARING_VALUES else header
    previous_value = state.mapping.get(field)

    if new_value is not None:
        if new_value not in state.headers:
            raise FieldError(field, f"Column '{new_value}' is not in the uploaded file")

        conflicting_field = state.mapped_field_for(new_value)
        if conflicting_field is not None and conflicting_field != field:
            message = f"This column is already mapped to {field_label(conflicting_field)}"
            logger.warning(
                f"Rejected mapping '{new_value}' → {field}: "
                f"already mapped to {conflicting_field}"
            )
            raise FieldError(field, message, conflicting_field=conflicting_field)

    if new_value == previous_value:
        return state

    new_mapping = dict(state.mapping)
    if new_value is None:
        new_mapping.pop(field, None)
    else:
        new_mapping[field] = new_value

    extra_fields = list(state.extra_fields)
    if new_value is not None:
        extra_fields = [extra for extra in extra_fields if extra != new_value]
    if previous_value is not None and previous_value not in new_mapping.values():
        if previous_value not in extra_fields:
            extra_fields.append(previous_value)

    logger.debug(f"Mapping updated: {field} '{previous_value}' → '{new_value}'")

    return MappingState(
        headers=state.headers,
        assignments=tuple(new_mapping.items()),
        extra_fields=tuple(extra_fields),
    )


def field_label(field: str) -> str:
    """'appointmentStatus' → 'appointment status'."""
    return _CAMEL_BOUNDARY.sub(r" \1", field).lower().strip()
