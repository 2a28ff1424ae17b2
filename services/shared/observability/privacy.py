import hashlib
import json
from collections.abc import Iterable, Mapping
from typing import Any

REDACTED = "[REDACTED]"

# Columns that identify a project or commercial document; logged as hashes.
IDENTIFIER_FIELDS = ("project_id", "quote_id", "purchase_order_id")


def hash_payload(value: Any) -> str:
    """
    Return a stable SHA-256 hash for the provided payload without leaking contents.

    Strings are encoded as UTF-8 and other objects are serialized via JSON
    (dates and enums through str()) before hashing.
    """

    if value is None:
        normalized = b"null"
    elif isinstance(value, str):
        normalized = value.encode("utf-8")
    else:
        normalized = json.dumps(value, sort_keys=True, default=str).encode("utf-8")

    return hashlib.sha256(normalized).hexdigest()


def redact_fields(payload: Mapping[str, Any], allowed_keys: Iterable[str]) -> dict[str, Any]:
    """
    Produce a shallow copy that keeps whitelisted keys, hashes identifier columns,
    and redacts everything else (notes, actor ids, ...).
    """

    whitelist = set(allowed_keys)
    redacted: dict[str, Any] = {}
    for key, value in payload.items():
        if key in whitelist:
            redacted[key] = value
        elif key in IDENTIFIER_FIELDS and value is not None:
            redacted[key] = hash_payload(value)[:16]
        else:
            redacted[key] = REDACTED
    return redacted
