"""
Upload session — state of one file-import flow, from file pick to result.

States:
    NO_FILE → FILE_SELECTED → MAPPED → SUBMITTING → SUCCESS | FAILURE

  - select_file() always starts over; a parse error leaves the session in
    NO_FILE with the message in `notice`.
  - Mapping edits are accepted in MAPPED and FAILURE.  A rejected edit is
    stored in `field_errors` and the mapping is untouched.
  - submit() requires every required field to be mapped.  On failure
    (including a submitter that raises) the mapping is kept, so the user
    can resubmit without re-mapping.
  - reset() returns to NO_FILE from any state.

Only one submission runs at a time.

Public API:
    SessionState, UploadSession
"""

import hashlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from processing.booking_importer import ImportSummary, import_bookings
from processing.column_mapper import auto_map
from processing.file_reader import read_headers, read_rows
from processing.import_validator import can_submit, missing_required_fields
from processing.mapping_editor import FieldError, MappingState, initial_state, set_mapping
from processing.upload_client import UploadResult, submit_import

logger = logging.getLogger(__name__)

Submitter = Callable[[str, bytes, dict[str, str]], UploadResult]


class SessionState(str, Enum):
    NO_FILE = "no_file"
    FILE_SELECTED = "file_selected"
    MAPPED = "mapped"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


_EDITABLE_STATES = {SessionState.MAPPED, SessionState.FAILURE}


@dataclass
class UploadSession:
    """Mutable per-user session; lives in st.session_state in the app."""

    state: SessionState = SessionState.NO_FILE
    file_name: str | None = None
    content: bytes | None = None
    mapping_state: MappingState = field(default_factory=MappingState)
    all_required_auto_mapped: bool = False
    all_fields_auto_mapped: bool = False
    field_errors: dict[str, str] = field(default_factory=dict)
    notice: str | None = None
    """Last toast-style message (parse failure, blocked submit, server error)."""

    result: UploadResult | None = None
    source_id: str | None = None
    """Identity of the last file handed to select_file(), cleared by reset()."""

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Discard everything and return to NO_FILE."""
        self.state = SessionState.NO_FILE
        self.file_name = None
        self.content = None
        self.mapping_state = MappingState()
        self.all_required_auto_mapped = False
        self.all_fields_auto_mapped = False
        self.field_errors = {}
        self.notice = None
        self.result = None
        self.source_id = None

    def is_new_selection(self, source_id: str) -> bool:
        """True if *source_id* is not the file this session last loaded."""
        return source_id != self.source_id

    def select_file(self, file_name: str, content: bytes, source_id: str | None = None) -> bool:
        """
        Load a new file, parse its headers and auto-map them.

        *source_id* identifies the selection (the uploader's file id); it
        defaults to a digest of the name and bytes.  It is kept even when
        parsing fails, so the same failed file is not re-read on every rerun.

        Returns:
            True if the session reached MAPPED, False on a parse failure.
        """
        if self.state == SessionState.SUBMITTING:
            logger.warning("File selection ignored while an upload is in progress")
            return False

        self.reset()
        self.source_id = source_id or _content_id(file_name, content)

        header_result = read_headers(file_name, content)
        if header_result.errors:
            self.notice = header_result.errors[0]
            logger.error(f"Could not read headers from '{file_name}': {self.notice}")
            return False

        self.file_name = file_name
        self.content = content
        self.state = SessionState.FILE_SELECTED

        auto_result = auto_map(header_result.headers)
        self.mapping_state = initial_state(auto_result)
        self.all_required_auto_mapped = auto_result.all_required_mapped
        self.all_fields_auto_mapped = auto_result.all_fields_mapped
        self.state = SessionState.MAPPED

        if auto_result.all_fields_mapped:
            extra_count = len(auto_result.extra_fields)
            self.notice = (
                f"All required and optional fields mapped. "
                f"{extra_count} extra field(s) will be ignored."
                if extra_count
                else "All fields mapped successfully!"
            )
        return True

    def set_mapping(self, field_name: str, header: str | None) -> bool:
        """
        Apply a manual mapping change.

        Returns:
            True if applied; False if rejected (see field_errors) or the
            session is not editable.
        """
        if self.state not in _EDITABLE_STATES:
            logger.warning(f"Mapping edit ignored in state {self.state.value}")
            return False

        self.field_errors.pop(field_name, None)
        try:
            self.mapping_state = set_mapping(self.mapping_state, field_name, header)
        except FieldError as exc:
            self.field_errors[exc.field] = exc.message
            return False
        return True

    def preview(self) -> ImportSummary | None:
        """
        Run the ingestion rules locally against the current mapping.

        Returns None (with `notice` set) when the file rows cannot be read
        or required fields are unmapped.
        """
        if self.content is None or not can_submit(self.mapping):
            return None
        rows = read_rows(self.file_name, self.content)
        if rows.errors:
            self.notice = rows.errors[0]
            return None
        return import_bookings(rows.dataframe, self.mapping)

    def submit(self, submitter: Submitter | None = None) -> UploadResult | None:
        """
        Upload the file with the current mapping.

        Args:
            submitter: Callable (file_name, content, mapping) → UploadResult.
                Defaults to upload_client.submit_import with its defaults.

        Returns:
            The UploadResult, or None if submission was not allowed.
        """
        if self.state not in _EDITABLE_STATES:
            logger.warning(f"Submit ignored in state {self.state.value}")
            return None

        missing = missing_required_fields(self.mapping)
        if missing:
            self.notice = "Please map all required fields before uploading."
            logger.info(f"Submit blocked, unmapped required fields: {missing}")
            return None

        submitter = submitter or submit_import
        self.state = SessionState.SUBMITTING
        try:
            result = submitter(self.file_name, self.content, self.mapping)
        except Exception as exc:
            logger.error(f"Upload of '{self.file_name}' raised: {exc}")
            result = UploadResult(success=False, error_message=f"Upload failed: {exc}")
        self.result = result

        if result.success:
            self.state = SessionState.SUCCESS
            self.notice = result.summary.message if result.summary else None
            # mapping belongs to the finished upload only
            self.mapping_state = MappingState()
            self.content = None
        else:
            self.state = SessionState.FAILURE
            self.notice = result.error_message
        return result

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def mapping(self) -> dict[str, str]:
        return dict(self.mapping_state.mapping)

    @property
    def extra_fields(self) -> list[str]:
        return list(self.mapping_state.extra_fields)

    @property
    def headers(self) -> list[str]:
        return list(self.mapping_state.headers)

    @property
    def can_submit(self) -> bool:
        return self.state in _EDITABLE_STATES and can_submit(self.mapping)


def _content_id(file_name: str, content: bytes) -> str:
    return f"{file_name}:{hashlib.sha1(content).hexdigest()}"
