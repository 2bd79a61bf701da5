"""Moderation and messaging configuration.

This module defines configuration for classifier admission control and
message submission, with environment variable overrides for production
tuning. Invalid environment values fall back to the defaults.

Environment Variables (Classifier):
- MODERATION_ENABLED: "false" switches moderation off (default: enabled)
- ANTHROPIC_API_KEY: Classifier credential; empty disables moderation
- ANTHROPIC_API_URL: Messages endpoint URL
- ANTHROPIC_API_VERSION: API version header value (default: 2023-06-01)
- MODERATION_TONE_MODEL / MODERATION_MEDIATION_MODEL: Model identifiers
- MODERATION_TONE_MAX_TOKENS / MODERATION_MEDIATION_MAX_TOKENS: Output bounds
- MODERATION_TIMEOUT_SECONDS: Remote call timeout (default: 10.0)
- MODERATION_FAIL_OPEN: "false" switches to fail-closed (default: fail-open)

Environment Variables (Admission control):
- MODERATION_RATE_LIMIT: Calls per identity per window (default: 100)
- MODERATION_RATE_WINDOW_SECONDS: Rate window length (default: 60)
- MODERATION_BREAKER_WINDOW_SECONDS: Breaker accounting window (default: 300)
- MODERATION_BREAKER_OPEN_SECONDS: Breaker cooldown (default: 60)
- MODERATION_BREAKER_MIN_REQUESTS: Outcomes before the breaker may open (default: 4)
- MODERATION_BREAKER_ERROR_THRESHOLD: Error rate that opens it (default: 0.5)

Environment Variables (Messaging):
- MESSAGE_MAX_LENGTH: Maximum trimmed body length (default: 2000)
- MEDIATION_CONTEXT_SIZE: Recent messages sent for mediation (default: 12)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_API_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-3-5-haiku-latest"

# Upper bound on conversation context sent to the classifier
MAX_MEDIATION_CONTEXT = 15


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable; only "true"/"false" are recognised."""
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized == "false":
        return False
    if normalized == "true":
        return True
    return default


@dataclass(frozen=True)
class ModerationConfig:
    """Configuration for the moderated messaging channel's classifier path.

    Attributes:
        enabled: Master switch for remote moderation.
        api_key: Classifier credential. Moderation is inactive without one.
        api_url: Classifier endpoint.
        api_version: Value of the anthropic-version header.
        tone_model: Model used for the pre-send hostility gate.
        mediation_model: Model used for conversation-level advice.
        tone_max_tokens: Output bound for tone analysis.
        mediation_max_tokens: Output bound for mediation advice.
        request_timeout_seconds: Bound on the single remote call.
        rate_limit_per_window: Classifier calls admitted per identity per window.
        rate_window_seconds: Fixed rate window length.
        breaker_window_seconds: Breaker accounting window length.
        breaker_open_seconds: Breaker cooldown once opened.
        breaker_min_requests: Outcomes required before the breaker may open.
        breaker_error_threshold: Error rate strictly above which it opens.
        fail_open: When True, an unavailable classifier never blocks delivery.
    """

    enabled: bool = True
    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    api_version: str = DEFAULT_API_VERSION
    tone_model: str = DEFAULT_MODEL
    mediation_model: str = DEFAULT_MODEL
    tone_max_tokens: int = 280
    mediation_max_tokens: int = 420
    request_timeout_seconds: float = 10.0
    rate_limit_per_window: int = 100
    rate_window_seconds: float = 60.0
    breaker_window_seconds: float = 300.0
    breaker_open_seconds: float = 60.0
    breaker_min_requests: int = 4
    breaker_error_threshold: float = 0.5
    fail_open: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.tone_max_tokens < 1 or self.mediation_max_tokens < 1:
            raise ValueError("max token bounds must be positive")
        if self.request_timeout_seconds <= 0:
            raise ValueError(
                f"request_timeout_seconds must be positive, got {self.request_timeout_seconds}"
            )
        if self.rate_limit_per_window < 1:
            raise ValueError(
                f"rate_limit_per_window must be positive, got {self.rate_limit_per_window}"
            )
        if self.rate_window_seconds <= 0:
            raise ValueError(
                f"rate_window_seconds must be positive, got {self.rate_window_seconds}"
            )
        if self.breaker_window_seconds <= 0 or self.breaker_open_seconds <= 0:
            raise ValueError("breaker window and cooldown must be positive")
        if self.breaker_min_requests < 1:
            raise ValueError(
                f"breaker_min_requests must be positive, got {self.breaker_min_requests}"
            )
        if not 0.0 <= self.breaker_error_threshold < 1.0:
            raise ValueError(
                "breaker_error_threshold must be in [0.0, 1.0), "
                f"got {self.breaker_error_threshold}"
            )

    @property
    def is_active(self) -> bool:
        """Feature flag consulted before every classifier call."""
        return self.enabled and bool(self.api_key)

    @classmethod
    def from_environment(cls) -> ModerationConfig:
        """Create config from environment variables with defaults."""
        return cls(
            enabled=_get_bool_env("MODERATION_ENABLED", True),
            api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
            api_url=os.environ.get("ANTHROPIC_API_URL", DEFAULT_API_URL),
            api_version=os.environ.get("ANTHROPIC_API_VERSION", DEFAULT_API_VERSION),
            tone_model=os.environ.get("MODERATION_TONE_MODEL", DEFAULT_MODEL),
            mediation_model=os.environ.get("MODERATION_MEDIATION_MODEL", DEFAULT_MODEL),
            tone_max_tokens=_get_int_env("MODERATION_TONE_MAX_TOKENS", 280),
            mediation_max_tokens=_get_int_env("MODERATION_MEDIATION_MAX_TOKENS", 420),
            request_timeout_seconds=_get_float_env("MODERATION_TIMEOUT_SECONDS", 10.0),
            rate_limit_per_window=_get_int_env("MODERATION_RATE_LIMIT", 100),
            rate_window_seconds=_get_float_env("MODERATION_RATE_WINDOW_SECONDS", 60.0),
            breaker_window_seconds=_get_float_env(
                "MODERATION_BREAKER_WINDOW_SECONDS", 300.0
            ),
            breaker_open_seconds=_get_float_env("MODERATION_BREAKER_OPEN_SECONDS", 60.0),
            breaker_min_requests=_get_int_env("MODERATION_BREAKER_MIN_REQUESTS", 4),
            breaker_error_threshold=_get_float_env(
                "MODERATION_BREAKER_ERROR_THRESHOLD", 0.5
            ),
            fail_open=_get_bool_env("MODERATION_FAIL_OPEN", True),
        )


@dataclass(frozen=True)
class MessagingConfig:
    """Configuration for message submission and mediation context.

    Attributes:
        max_body_length: Longest trimmed body accepted.
        default_thread_subject: Subject of a family's auto-created thread.
        mediation_context_size: Most recent messages used for mediation.
        mediation_min_messages: Messages required before advice is offered.
    """

    max_body_length: int = 2000
    default_thread_subject: str = "Family Messages"
    mediation_context_size: int = 12
    mediation_min_messages: int = 2

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_body_length < 1:
            raise ValueError(
                f"max_body_length must be positive, got {self.max_body_length}"
            )
        if not 1 <= self.mediation_context_size <= MAX_MEDIATION_CONTEXT:
            raise ValueError(
                f"mediation_context_size must be in [1, {MAX_MEDIATION_CONTEXT}], "
                f"got {self.mediation_context_size}"
            )
        if self.mediation_min_messages < 1:
            raise ValueError(
                f"mediation_min_messages must be positive, got {self.mediation_min_messages}"
            )

    @classmethod
    def from_environment(cls) -> MessagingConfig:
        """Create config from environment variables with defaults."""
        return cls(
            max_body_length=_get_int_env("MESSAGE_MAX_LENGTH", 2000),
            mediation_context_size=_get_int_env("MEDIATION_CONTEXT_SIZE", 12),
        )


# Default configuration (production-ready values, no credential)
DEFAULT_MODERATION_CONFIG = ModerationConfig()

# Test configuration (active, short windows, fast timeout)
TEST_MODERATION_CONFIG = ModerationConfig(
    api_key="test-key",
    request_timeout_seconds=0.5,
    rate_limit_per_window=5,
)

# Fail-closed configuration: classifier unavailability rejects the draft
STRICT_MODERATION_CONFIG = ModerationConfig(fail_open=False)

DEFAULT_MESSAGING_CONFIG = MessagingConfig()
