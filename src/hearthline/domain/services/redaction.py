"""PII redaction for text leaving the trust boundary.

Applies a fixed, ordered set of pattern -> placeholder replacements to the
copy of a message that is sent to the remote classifier. Stored messages
are never redacted.

Ordering matters: the more specific shapes run first so that, for example,
an SSN is reported as an SSN and not swallowed by the looser phone shape.
Placeholders contain no digits, '@' or token characters, which makes
redaction idempotent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class RedactionRule:
    """One pattern and the placeholder that replaces its matches.

    Attributes:
        name: Short rule name (for tests and diagnostics).
        pattern: Compiled pattern.
        placeholder: Replacement text.
    """

    name: str
    pattern: re.Pattern[str]
    placeholder: str


DEFAULT_REDACTION_RULES: tuple[RedactionRule, ...] = (
    RedactionRule(
        name="bearer_token",
        # 16+ unbroken token characters; "bearer of bad news" never qualifies
        pattern=re.compile(
            r"\bBearer\s+[A-Za-z0-9\-._~+/]{16,}=*",
            re.IGNORECASE,
        ),
        placeholder="[redacted_token]",
    ),
    RedactionRule(
        name="jwt",
        pattern=re.compile(r"\beyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
        placeholder="[redacted_token]",
    ),
    RedactionRule(
        name="email",
        pattern=re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE),
        placeholder="[redacted_email]",
    ),
    RedactionRule(
        name="ssn",
        pattern=re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
        placeholder="[redacted_ssn]",
    ),
    RedactionRule(
        name="card",
        # ISO dates and the digits inside them never start a card number
        pattern=re.compile(r"(?<![\w-])(?!\d{4}-\d{2}-\d{2})(?:\d[ -]*?){13,19}\b"),
        placeholder="[redacted_card]",
    ),
    RedactionRule(
        name="phone",
        # ISO dates (e.g. conversation timestamps) are not phone numbers
        pattern=re.compile(r"(?<![\w-])(?!\d{4}-\d{2}-\d{2})\+?\d[\d\s().-]{8,}\d"),
        placeholder="[redacted_phone]",
    ),
)


class Redactor:
    """Strips PII-shaped substrings from text.

    Never fails: unmatched input passes through unchanged and redacting
    already-redacted text is a no-op.

    Example:
        >>> Redactor().redact("mail me at sam@example.com")
        'mail me at [redacted_email]'
    """

    def __init__(self, rules: tuple[RedactionRule, ...] = DEFAULT_REDACTION_RULES) -> None:
        self._rules = rules

    @property
    def rules(self) -> tuple[RedactionRule, ...]:
        """Rules in application order."""
        return self._rules

    def redact(self, text: str) -> str:
        """Replace every PII-shaped substring with its placeholder.

        Args:
            text: Untrusted free text.

        Returns:
            Text with no remaining matches of any rule.
        """
        redacted = text
        for rule in self._rules:
            redacted = rule.pattern.sub(rule.placeholder, redacted)
        return redacted


_default_redactor = Redactor()


def redact_pii(text: str) -> str:
    """Redact text with the default rule set."""
    return _default_redactor.redact(text)
