"""
Streamlit entry point — Referable booking import UI.

Wires the import flow into a 4-step page:
  1. File upload (CSV or XLSX booking export)
  2. Column mapping (auto-mapped, editable per field)
  3. Import preview (local dry run of the ingestion rules)
  4. Upload to the Referable backend and show the server summary

Contains NO business logic — only calls processing modules and displays results.
"""

import logging

import pandas as pd
import streamlit as st

from config.field_config import (
    FIELD_LABELS,
    NOT_MAPPED,
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
)
from config.import_rules import ACCEPTED_EXTENSIONS
from config.upload_config import DEFAULT_API_BASE_URL
from processing.import_validator import missing_required_fields
from processing.upload_client import submit_import
from processing.upload_session import SessionState, UploadSession
from utils.fuzzy_match import suggest_header

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Page configuration
# ═══════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title="Referable — Import Bookings",
    page_icon="📇",
    layout="wide",
)


# ═══════════════════════════════════════════════════════════════════════════
# Session state initialisation
# ═══════════════════════════════════════════════════════════════════════════

def _init_session_state() -> None:
    """Ensure all required session state keys exist with sensible defaults."""
    defaults: dict = {
        "upload_session": UploadSession(),
        "uploader_key": 0,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


_init_session_state()
session: UploadSession = st.session_state["upload_session"]

# Backend settings from .streamlit/secrets.toml
api_base_url = st.secrets.get("REFERABLE_API_URL", DEFAULT_API_BASE_URL)
api_token = st.secrets.get("REFERABLE_API_TOKEN", None)


def _submitter(file_name: str, content: bytes, mapping: dict[str, str]):
    return submit_import(
        file_name,
        content,
        mapping,
        base_url=api_base_url,
        auth_token=api_token,
    )


def _reset_upload() -> None:
    session.reset()
    # a new key clears the file_uploader widget
    st.session_state["uploader_key"] += 1


def _on_mapping_change(field_name: str) -> None:
    widget_key = f"map_{field_name}"
    choice = st.session_state[widget_key]
    applied = session.set_mapping(field_name, None if choice == NOT_MAPPED else choice)
    if not applied:
        # put the dropdown back on the value the mapping still holds
        st.session_state[widget_key] = session.mapping.get(field_name, NOT_MAPPED)


# ═══════════════════════════════════════════════════════════════════════════
# Main area — Title
# ═══════════════════════════════════════════════════════════════════════════

st.title("📇 Import Bookings")
st.caption(
    "Upload a booking export from your scheduling system. Columns are matched "
    "automatically; adjust any mapping before importing."
)


# ═══════════════════════════════════════════════════════════════════════════
# Section 1: File Upload
# ═══════════════════════════════════════════════════════════════════════════

st.header("📁 Upload File")

uploaded_file = st.file_uploader(
    "Booking export",
    type=ACCEPTED_EXTENSIONS,
    accept_multiple_files=False,
    key=f"uploader_{st.session_state['uploader_key']}",
    help="CSV or Excel file with one booking per row.",
)

# New file selection discards the previous mapping entirely
if uploaded_file is not None and session.is_new_selection(uploaded_file.file_id):
    for field_name in REQUIRED_FIELDS + OPTIONAL_FIELDS:
        st.session_state.pop(f"map_{field_name}", None)
    if not session.select_file(
        uploaded_file.name, uploaded_file.getvalue(), source_id=uploaded_file.file_id
    ):
        st.error(session.notice or "Failed to parse file.")
    elif session.all_fields_auto_mapped:
        st.toast(f"Auto-mapping successful! {session.notice}")
elif uploaded_file is None and session.source_id is not None:
    session.reset()


# ═══════════════════════════════════════════════════════════════════════════
# Section 2: Column Mapping
# ═══════════════════════════════════════════════════════════════════════════

if session.state in (SessionState.MAPPED, SessionState.FAILURE):
    st.divider()
    st.header("🔗 Step 1: Map Columns")

    options = [NOT_MAPPED] + session.headers

    def _render_field(field_name: str, required: bool) -> None:
        current = session.mapping.get(field_name, NOT_MAPPED)
        widget_key = f"map_{field_name}"
        if widget_key not in st.session_state:
            st.session_state[widget_key] = current
        label = FIELD_LABELS[field_name] + (" *" if required else " (optional)")
        st.selectbox(
            label,
            options=options,
            key=widget_key,
            format_func=lambda value: "— Not mapped —" if value == NOT_MAPPED else value,
            on_change=_on_mapping_change,
            args=(field_name,),
        )
        if field_name in session.field_errors:
            st.error(session.field_errors[field_name])
        elif field_name not in session.mapping:
            suggestion, _ = suggest_header(field_name, session.extra_fields)
            if suggestion:
                st.caption(f"Did you mean '{suggestion}'?")

    req_col, opt_col = st.columns(2)
    with req_col:
        st.subheader("Required")
        for field_name in REQUIRED_FIELDS:
            _render_field(field_name, required=True)
    with opt_col:
        st.subheader("Optional")
        for field_name in OPTIONAL_FIELDS:
            _render_field(field_name, required=False)

    if session.extra_fields:
        st.info(
            f"{len(session.extra_fields)} extra column(s) will be ignored: "
            + ", ".join(session.extra_fields)
        )

    missing = missing_required_fields(session.mapping)
    if missing:
        st.warning(
            "Map all required fields before importing. Missing: "
            + ", ".join(FIELD_LABELS[field_name] for field_name in missing)
        )


# ═══════════════════════════════════════════════════════════════════════════
# Section 3: Preview
# ═══════════════════════════════════════════════════════════════════════════

if session.can_submit:
    st.divider()
    st.header("🔍 Step 2: Preview")

    summary = session.preview()
    if summary is None:
        st.error(session.notice or "Could not read rows from the file.")
    else:
        metric_cols = st.columns(4)
        metric_cols[0].metric("Rows", summary.total_rows)
        metric_cols[1].metric("Will import", summary.processed)
        metric_cols[2].metric("Will skip", summary.skipped)
        metric_cols[3].metric("Phone coverage", f"{summary.phone_stats.coverage}%")

        if summary.bookings:
            st.dataframe(
                pd.DataFrame([
                    {
                        "Client Name": booking.client_name,
                        "Client Email": booking.client_email,
                        "Client Phone": booking.client_phone or "",
                        "Service Date": booking.service_date.date(),
                        "Amount Charged": booking.amount_charged or "",
                    }
                    for booking in summary.bookings[:20]
                ]),
                use_container_width=True,
                hide_index=True,
            )
        if summary.errors:
            with st.expander(f"Skipped rows ({summary.skipped})"):
                for error in summary.errors:
                    st.text(error)


# ═══════════════════════════════════════════════════════════════════════════
# Section 4: Upload
# ═══════════════════════════════════════════════════════════════════════════

if session.state in (SessionState.MAPPED, SessionState.FAILURE):
    st.divider()
    button_col, reset_col = st.columns([3, 1])
    with button_col:
        if st.button(
            "Import Bookings ▶",
            type="primary",
            disabled=not session.can_submit,
            use_container_width=True,
        ):
            with st.spinner("Uploading..."):
                session.submit(_submitter)
            st.rerun()
    with reset_col:
        st.button("Reset", on_click=_reset_upload, use_container_width=True)

    if session.state == SessionState.FAILURE:
        st.error(f"Upload Failed: {session.notice}")

if session.state == SessionState.SUCCESS and session.result and session.result.summary:
    st.divider()
    server_summary = session.result.summary
    st.success(f"Upload Successful — {server_summary.message}")
    metric_cols = st.columns(3)
    metric_cols[0].metric("Processed", server_summary.processed)
    metric_cols[1].metric("Skipped", server_summary.skipped)
    metric_cols[2].metric("Total rows", server_summary.total_rows)
    if server_summary.errors:
        with st.expander("Row errors"):
            for error in server_summary.errors:
                st.text(error)
    st.button("Import another file", on_click=_reset_upload)
