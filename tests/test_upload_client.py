"""
Tests for processing/upload_client.py

Covers: multipart request shape, success summary parsing, server error
messages (JSON and non-JSON), network failures, and session / auth usage.
All HTTP is mocked.
"""

import json
from unittest.mock import MagicMock, patch

import requests

from processing.upload_client import UploadResult, UploadSummary, submit_import

_MAPPING = {
    "clientName": "Name",
    "clientEmail": "Email",
    "serviceDate": "Date",
    "appointmentStatus": "Status",
    "clientPhone": "__not_mapped__",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _response(status_code: int = 200, body=None, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body if body is not None else {}
    return response


# ═══════════════════════════════════════════════════════════════════════════
# Request shape
# ═══════════════════════════════════════════════════════════════════════════

class TestRequest:
    @patch("processing.upload_client.requests.post")
    def test_posts_file_and_clean_mapping(self, mock_post):
        mock_post.return_value = _response(body={"processed": 1})
        submit_import("bookings.csv", b"data", _MAPPING, base_url="https://api.example.com/")

        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.example.com/api/upload/csv"
        assert kwargs["files"] == {"csv": ("bookings.csv", b"data")}
        sent_mapping = json.loads(kwargs["data"]["mapping"])
        assert sent_mapping == {
            "clientName": "Name",
            "clientEmail": "Email",
            "serviceDate": "Date",
            "appointmentStatus": "Status",
        }
        assert kwargs["headers"] == {}

    @patch("processing.upload_client.requests.post")
    def test_bearer_token(self, mock_post):
        mock_post.return_value = _response(body={})
        submit_import("bookings.csv", b"data", _MAPPING, auth_token="secret")
        assert mock_post.call_args.kwargs["headers"] == {"Authorization": "Bearer secret"}

    def test_uses_given_session(self):
        session = MagicMock()
        session.post.return_value = _response(body={"processed": 2})
        result = submit_import("bookings.csv", b"data", _MAPPING, session=session)
        assert session.post.called
        assert result.success is True


# ═══════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════

class TestResponses:
    @patch("processing.upload_client.requests.post")
    def test_success_summary(self, mock_post):
        mock_post.return_value = _response(body={
            "message": "Processed 3 bookings, skipped 1",
            "processed": 3,
            "skipped": 1,
            "totalRows": 4,
            "phoneStats": {"phonesFound": 2, "phonesMissing": 1, "coverage": 67},
            "errors": ['Skipping row: appointment not completed (status: "cancelled")'],
        })
        result = submit_import("bookings.csv", b"data", _MAPPING)

        assert isinstance(result, UploadResult)
        assert result.success is True
        assert result.status_code == 200
        assert isinstance(result.summary, UploadSummary)
        assert result.summary.processed == 3
        assert result.summary.skipped == 1
        assert result.summary.total_rows == 4
        assert result.summary.phone_stats["coverage"] == 67
        assert len(result.summary.errors) == 1
        assert result.summary.message == "Processed 3 bookings, skipped 1"

    @patch("processing.upload_client.requests.post")
    def test_server_message_on_error(self, mock_post):
        mock_post.return_value = _response(400, body={"message": "CSV is missing required headers"})
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.success is False
        assert result.error_message == "CSV is missing required headers"
        assert result.status_code == 400

    @patch("processing.upload_client.requests.post")
    def test_non_json_error(self, mock_post):
        mock_post.return_value = _response(502, json_error=True)
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.success is False
        assert result.error_message == "Upload failed with status: 502"

    @patch("processing.upload_client.requests.post")
    def test_json_error_without_message(self, mock_post):
        mock_post.return_value = _response(500, body={"error": "boom"})
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.error_message == "Upload failed"

    @patch("processing.upload_client.requests.post")
    def test_network_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("connection refused")
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.success is False
        assert "connection refused" in result.error_message
        assert result.status_code is None

    @patch("processing.upload_client.requests.post")
    def test_success_with_unreadable_body(self, mock_post):
        mock_post.return_value = _response(200, json_error=True)
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.success is False
        assert result.status_code == 200

    @patch("processing.upload_client.requests.post")
    def test_no_retry(self, mock_post):
        mock_post.return_value = _response(500, body={"message": "Failed to process CSV file"})
        submit_import("bookings.csv", b"data", _MAPPING)
        assert mock_post.call_count == 1

    @patch("processing.upload_client.requests.post")
    def test_loose_summary_fields(self, mock_post):
        mock_post.return_value = _response(body={
            "processed": None,
            "skipped": "2",
            "totalRows": "n/a",
            "errors": "not a list",
            "phoneStats": [],
        })
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.success is True
        assert result.summary.processed == 0
        assert result.summary.skipped == 2
        assert result.summary.total_rows == 0
        assert result.summary.errors == []
        assert result.summary.phone_stats == {}
        assert result.summary.message == ""

    @patch("processing.upload_client.requests.post")
    def test_success_with_non_object_body(self, mock_post):
        mock_post.return_value = _response(200, body=[{"processed": 1}])
        result = submit_import("bookings.csv", b"data", _MAPPING)
        assert result.success is False
        assert result.error_message == "Upload succeeded but the server response could not be read"
        assert result.status_code == 200
