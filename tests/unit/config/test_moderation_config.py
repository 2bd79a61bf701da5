"""Unit tests for moderation and messaging configuration."""

from __future__ import annotations

import pytest

from hearthline.config.moderation_config import (
    DEFAULT_MODERATION_CONFIG,
    STRICT_MODERATION_CONFIG,
    TEST_MODERATION_CONFIG,
    MessagingConfig,
    ModerationConfig,
)


class TestModerationConfig:
    """Tests for ModerationConfig."""

    def test_defaults(self) -> None:
        config = DEFAULT_MODERATION_CONFIG
        assert config.rate_limit_per_window == 100
        assert config.rate_window_seconds == 60.0
        assert config.breaker_window_seconds == 300.0
        assert config.breaker_open_seconds == 60.0
        assert config.breaker_min_requests == 4
        assert config.breaker_error_threshold == 0.5
        assert config.request_timeout_seconds == 10.0
        assert config.tone_max_tokens == 280
        assert config.mediation_max_tokens == 420
        assert config.fail_open is True

    def test_inactive_without_api_key(self) -> None:
        assert not DEFAULT_MODERATION_CONFIG.is_active

    def test_inactive_when_disabled(self) -> None:
        assert not ModerationConfig(enabled=False, api_key="k").is_active

    def test_active_with_key(self) -> None:
        assert TEST_MODERATION_CONFIG.is_active

    def test_strict_config_fails_closed(self) -> None:
        assert STRICT_MODERATION_CONFIG.fail_open is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rate_limit_per_window": 0},
            {"rate_window_seconds": 0},
            {"request_timeout_seconds": -1},
            {"breaker_min_requests": 0},
            {"breaker_error_threshold": 1.0},
            {"breaker_open_seconds": 0},
            {"tone_max_tokens": 0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            ModerationConfig(**kwargs)  # type: ignore[arg-type]

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("MODERATION_RATE_LIMIT", "7")
        monkeypatch.setenv("MODERATION_BREAKER_ERROR_THRESHOLD", "0.25")
        monkeypatch.setenv("MODERATION_FAIL_OPEN", "false")

        config = ModerationConfig.from_environment()

        assert config.is_active
        assert config.rate_limit_per_window == 7
        assert config.breaker_error_threshold == 0.25
        assert config.fail_open is False

    def test_from_environment_ignores_invalid_values(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MODERATION_RATE_LIMIT", "lots")
        monkeypatch.setenv("MODERATION_ENABLED", "maybe")
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        config = ModerationConfig.from_environment()

        assert config.rate_limit_per_window == 100
        assert config.enabled is True
        assert not config.is_active

    def test_moderation_disabled_by_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("MODERATION_ENABLED", "false")

        assert not ModerationConfig.from_environment().is_active


class TestMessagingConfig:
    """Tests for MessagingConfig."""

    def test_defaults(self) -> None:
        config = MessagingConfig()
        assert config.max_body_length == 2000
        assert config.mediation_context_size == 12
        assert config.mediation_min_messages == 2

    def test_context_size_bounded_by_classifier_limit(self) -> None:
        with pytest.raises(ValueError, match="mediation_context_size"):
            MessagingConfig(mediation_context_size=16)

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MESSAGE_MAX_LENGTH", "500")
        monkeypatch.setenv("MEDIATION_CONTEXT_SIZE", "15")

        config = MessagingConfig.from_environment()

        assert config.max_body_length == 500
        assert config.mediation_context_size == 15
