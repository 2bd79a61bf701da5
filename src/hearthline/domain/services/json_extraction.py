"""Best-effort extraction of a JSON object from free-text model output.

The classifier is instructed to answer with a single JSON object, but
model output routinely wraps it in prose or markdown fences. Extraction
takes the substring from the first '{' to the last '}' and parses it.

Known limits:
- Two separate objects ("{...} and {...}") produce an invalid slice and
  are rejected rather than guessed at.
- Truncated output (no closing brace) is rejected.
"""

from __future__ import annotations

import json
from typing import Any

from hearthline.domain.errors.moderation import MalformedResponseError


def extract_json_object(raw_text: str) -> dict[str, Any]:
    """Extract and parse the JSON object embedded in raw_text.

    Args:
        raw_text: Free text returned by the classifier.

    Returns:
        The parsed object.

    Raises:
        MalformedResponseError: If no brace-delimited slice exists or the
            slice is not valid JSON.

    Example:
        >>> extract_json_object('Sure! {"isHostile": false}')
        {'isHostile': False}
    """
    trimmed = raw_text.strip()
    first_brace = trimmed.find("{")
    last_brace = trimmed.rfind("}")

    if first_brace < 0 or last_brace <= first_brace:
        raise MalformedResponseError("Classifier response did not include a JSON object")

    json_slice = trimmed[first_brace : last_brace + 1]
    try:
        # A slice that starts with '{' can only parse to a dict
        parsed: dict[str, Any] = json.loads(json_slice)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(
            f"Classifier response JSON could not be parsed: {exc.msg}"
        ) from exc
    return parsed
