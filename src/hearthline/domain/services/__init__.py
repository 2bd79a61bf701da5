"""Pure domain services (no I/O)."""

from hearthline.domain.services.json_extraction import extract_json_object
from hearthline.domain.services.mediation_suggestions import MediationSuggestionEngine
from hearthline.domain.services.message_hash import (
    canonical_json,
    compute_message_hash,
    recompute_message_hash,
)
from hearthline.domain.services.redaction import Redactor, redact_pii

__all__: list[str] = [
    "MediationSuggestionEngine",
    "Redactor",
    "canonical_json",
    "compute_message_hash",
    "extract_json_object",
    "recompute_message_hash",
    "redact_pii",
]
