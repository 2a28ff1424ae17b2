"""
Shared observability helpers (telemetry, privacy utilities).

Services import from this package to get consistent JSON logging, request
correlation, and log scrubbing for project identifiers and free-text notes.
"""

from .privacy import IDENTIFIER_FIELDS, REDACTED, hash_payload, redact_fields
from .telemetry import (
    CORRELATION_ID_HEADER,
    RequestContextToken,
    TelemetryConfig,
    bind_request_context,
    current_request_id,
    ensure_request_id,
    install_request_context,
    reset_request_context,
    setup_telemetry,
)

__all__ = [
    "IDENTIFIER_FIELDS",
    "REDACTED",
    "hash_payload",
    "redact_fields",
    "CORRELATION_ID_HEADER",
    "RequestContextToken",
    "TelemetryConfig",
    "bind_request_context",
    "current_request_id",
    "ensure_request_id",
    "install_request_context",
    "reset_request_context",
    "setup_telemetry",
]
