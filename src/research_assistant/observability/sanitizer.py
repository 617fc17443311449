"""Sensitive data sanitization for logging.

Recursively redacts credential-looking fields (including the model and
search provider keys) from request bodies and headers before they are
logged by the request middleware.
"""

from collections.abc import Mapping
from typing import Any

from research_assistant.observability.constants import (
    REDACTED_VALUE,
    SENSITIVE_FIELD_PATTERNS,
    SENSITIVE_FIELDS,
    SENSITIVE_HEADERS,
)

# Lists longer than this are cut when logged
MAX_LOGGED_ITEMS = 100


def _is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates a credential.

    Args:
        field_name: The field name to check.

    Returns:
        True if the field should be redacted.
    """
    field_lower = field_name.lower()

    # Exact names first, then substrings such as "key" in "fireworksKey"
    if field_lower in SENSITIVE_FIELDS:
        return True

    return any(pattern in field_lower for pattern in SENSITIVE_FIELD_PATTERNS)


def sanitize(data: Any, max_depth: int = 10) -> Any:
    """Recursively sanitize sensitive data from a structure.

    Args:
        data: The data to sanitize (dict, list, tuple, or scalar).
        max_depth: Maximum recursion depth; anything deeper is redacted whole.

    Returns:
        Sanitized copy of the data with sensitive fields redacted.
    """
    if max_depth <= 0:
        return REDACTED_VALUE

    if isinstance(data, dict):
        return {
            k: REDACTED_VALUE if _is_sensitive_field(str(k)) else sanitize(v, max_depth - 1)
            for k, v in data.items()
        }

    if isinstance(data, list):
        return [sanitize(item, max_depth - 1) for item in data]

    if isinstance(data, tuple):
        return tuple(sanitize(item, max_depth - 1) for item in data)

    return data


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy HTTP headers with credential-bearing ones redacted."""
    return {k: REDACTED_VALUE if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def truncate_body(body: Any, max_length: int = 1000) -> Any:
    """Truncate a request body for logging.

    Long research questions and pasted transcripts are cut to ``max_length``
    characters; long history lists keep their first ``MAX_LOGGED_ITEMS`` turns.

    Args:
        body: The body content to truncate.
        max_length: Maximum length for string values.

    Returns:
        Truncated copy of the body.
    """
    if isinstance(body, str) and len(body) > max_length:
        return body[:max_length] + f"... [truncated, {len(body)} total chars]"

    if isinstance(body, bytes) and len(body) > max_length:
        return f"[binary data, {len(body)} bytes]"

    if isinstance(body, dict):
        return {k: truncate_body(v, max_length) for k, v in body.items()}

    if isinstance(body, list):
        kept = [truncate_body(item, max_length) for item in body[:MAX_LOGGED_ITEMS]]
        if len(body) > MAX_LOGGED_ITEMS:
            kept.append(f"... [{len(body) - MAX_LOGGED_ITEMS} more items]")
        return kept

    return body
