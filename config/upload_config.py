"""
Backend endpoint defaults for the import upload.

app.py overrides these from st.secrets (REFERABLE_API_URL,
REFERABLE_API_TOKEN) when they are configured.
"""

DEFAULT_API_BASE_URL: str = "http://localhost:5000"

UPLOAD_PATH: str = "/api/upload/csv"

# Multipart field names expected by the import endpoint.
FILE_FIELD_NAME: str = "csv"
MAPPING_FIELD_NAME: str = "mapping"

# Seconds before the upload request is abandoned.
UPLOAD_TIMEOUT_SECONDS: int = 60
