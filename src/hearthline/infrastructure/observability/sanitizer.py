"""Sensitive-data scrubbing for structured log entries.

Every log entry passes through sanitize_event_processor before rendering:
- keys that look like credentials or contact details are fully masked
- every other string has email, SSN and phone shapes replaced
- nesting deeper than MAX_DEPTH is truncated

Independent of the Redactor used for outbound classifier payloads.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

MAX_DEPTH = 4
MASK = "[redacted]"
TRUNCATED = "[truncated]"

SENSITIVE_KEY_PATTERN = re.compile(
    r"(^|_)(email|phone|ssn|password|token|authorization|cookie|secret|api_key|apikey|access_key)($|_)",
    re.IGNORECASE,
)

# Reserved structlog keys are never masked by name
_RESERVED_KEYS = frozenset({"event", "level", "timestamp", "logger"})

_STRING_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE), "[email]"),
    (re.compile(r"\b\d{3}-\d{2}-\d{4}\b"), "[ssn]"),
    (re.compile(r"\+?\d[\d\s().-]{8,}\d"), "[phone]"),
)


# Whole-value identifiers and timestamps contain digit runs that look like
# phone numbers; they carry no PII and are left intact.
_PASSTHROUGH = (
    re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I),
    re.compile(r"\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})?)?"),
    re.compile(r"[0-9a-f]{64}"),
)


def redact_log_string(value: str) -> str:
    """Replace email, SSN and phone shapes in a log string."""
    if any(pattern.fullmatch(value) for pattern in _PASSTHROUGH):
        return value
    redacted = value
    for pattern, replacement in _STRING_RULES:
        redacted = pattern.sub(replacement, redacted)
    return redacted


def sanitize_value(value: Any, depth: int = 0) -> Any:
    """Recursively scrub one log value.

    Args:
        value: Any value bound to a log entry.
        depth: Current nesting depth.

    Returns:
        A JSON-friendly, scrubbed copy of value.
    """
    if depth > MAX_DEPTH:
        return TRUNCATED
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return redact_log_string(value)
    if isinstance(value, BaseException):
        return {"name": type(value).__name__, "message": redact_log_string(str(value))}
    if isinstance(value, Mapping):
        return {
            str(key): MASK
            if SENSITIVE_KEY_PATTERN.search(str(key))
            else sanitize_value(entry, depth + 1)
            for key, entry in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [sanitize_value(entry, depth + 1) for entry in value]
    return redact_log_string(str(value))


def sanitize_event_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor that scrubs an entire event dict.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to scrub.

    Returns:
        The scrubbed event dictionary.
    """
    sanitized: dict[str, Any] = {}
    for key, value in event_dict.items():
        if key not in _RESERVED_KEYS and SENSITIVE_KEY_PATTERN.search(key):
            sanitized[key] = MASK
        elif key == "exc_info":
            # Left for the exception renderer
            sanitized[key] = value
        else:
            sanitized[key] = sanitize_value(value, depth=1)
    return sanitized
