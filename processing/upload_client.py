"""
Upload client — sends a file and its header mapping to the import endpoint.

One multipart POST per submission, fields "csv" (the raw file) and
"mapping" (JSON of logical field → header).  There is no retry: a failure
comes back as an UploadResult with the server's message so the UI can show
it and let the user resubmit.

Public API:
    submit_import(file_name, content, mapping, ...) → UploadResult
"""

import json
import logging
from dataclasses import dataclass, field

import requests

from config.upload_config import (
    DEFAULT_API_BASE_URL,
    FILE_FIELD_NAME,
    MAPPING_FIELD_NAME,
    UPLOAD_PATH,
    UPLOAD_TIMEOUT_SECONDS,
)
from processing.import_validator import clean_mapping

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class UploadSummary:
    """Server-side import summary, rendered as-is by the UI."""

    processed: int = 0
    skipped: int = 0
    total_rows: int = 0
    errors: list[str] = field(default_factory=list)
    phone_stats: dict = field(default_factory=dict)
    message: str = ""


@dataclass
class UploadResult:
    success: bool = False
    summary: UploadSummary | None = None
    error_message: str | None = None
    status_code: int | None = None


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def submit_import(
    file_name: str,
    content: bytes,
    mapping: dict[str, str],
    base_url: str = DEFAULT_API_BASE_URL,
    auth_token: str | None = None,
    session: requests.Session | None = None,
    timeout: int = UPLOAD_TIMEOUT_SECONDS,
) -> UploadResult:
    """
    POST the file and mapping to the import endpoint.

    Args:
        file_name: Original file name, passed through to the server.
        content: Raw file bytes.
        mapping: Logical field → header; placeholders are removed first.
        base_url: Backend root URL.
        auth_token: Optional bearer token.
        session: Optional requests.Session (keeps login cookies).
        timeout: Request timeout in seconds.

    Returns:
        UploadResult; success=False carries a user-facing error_message.
    """
    url = base_url.rstrip("/") + UPLOAD_PATH
    headers = {"Authorization": f"Bearer {auth_token}"} if auth_token else {}
    files = {FILE_FIELD_NAME: (file_name, content)}
    data = {MAPPING_FIELD_NAME: json.dumps(clean_mapping(mapping))}

    http = session or requests
    logger.info(f"Uploading '{file_name}' ({len(content)} bytes) to {url}")

    try:
        response = http.post(url, files=files, data=data, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        logger.error(f"Upload of '{file_name}' failed: {exc}")
        return UploadResult(success=False, error_message=f"Upload failed: {exc}")

    if not response.ok:
        error_message = _error_message(response)
        logger.error(
            f"Upload of '{file_name}' rejected with status "
            f"{response.status_code}: {error_message}"
        )
        return UploadResult(
            success=False,
            error_message=error_message,
            status_code=response.status_code,
        )

    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        logger.error(f"Upload of '{file_name}' returned an unreadable body")
        return UploadResult(
            success=False,
            error_message="Upload succeeded but the server response could not be read",
            status_code=response.status_code,
        )

    errors = body.get("errors")
    phone_stats = body.get("phoneStats")
    summary = UploadSummary(
        processed=_as_int(body.get("processed")),
        skipped=_as_int(body.get("skipped")),
        total_rows=_as_int(body.get("totalRows")),
        errors=[str(e) for e in errors] if isinstance(errors, list) else [],
        phone_stats=dict(phone_stats) if isinstance(phone_stats, dict) else {},
        message=str(body.get("message") or ""),
    )
    logger.info(
        f"Upload of '{file_name}' complete: {summary.processed} processed, "
        f"{summary.skipped} skipped"
    )
    return UploadResult(success=True, summary=summary, status_code=response.status_code)


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _error_message(response: requests.Response) -> str:
    """Server's JSON "message", else a generic status line."""
    try:
        body = response.json()
    except ValueError:
        return f"Upload failed with status: {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "Upload failed"


def _as_int(value) -> int:
    """Summary counter as int; missing or non-numeric values count as 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
