"""Unit tests for the pre-send hostility gate."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from hearthline.application.services.tone_classifier_service import (
    TONE_SYSTEM_PROMPT,
    TONE_USER_PREFIX,
    ToneClassifier,
    parse_tone_result,
)
from hearthline.domain.errors.moderation import (
    MalformedResponseError,
    TransportFailureError,
)
from hearthline.domain.models.moderation import ModerationDegradation
from hearthline.infrastructure.stubs.classifier_client_stub import ClassifierClientStub
from tests.helpers import FakeTimeAuthority, build_gateway

HOSTILE_VERDICT = {
    "isHostile": True,
    "indicators": ["all-caps yelling", "aggressive blame"],
    "neutralRewrite": "I'm frustrated this keeps happening. Can we talk about it?",
}


class TestParseToneResult:
    """Tests for parse_tone_result()."""

    def test_full_verdict(self) -> None:
        result = parse_tone_result(HOSTILE_VERDICT)

        assert result.is_hostile is True
        assert result.indicators == ("all-caps yelling", "aggressive blame")
        assert result.neutral_rewrite.startswith("I'm frustrated")
        assert result.from_fallback is False

    def test_only_is_hostile_required(self) -> None:
        result = parse_tone_result({"isHostile": False})

        assert result.is_hostile is False
        assert result.indicators == ()
        assert result.neutral_rewrite == ""

    @pytest.mark.parametrize("value", [{}, {"isHostile": "true"}, {"isHostile": 1}])
    def test_non_boolean_is_hostile_rejected(self, value: dict[str, object]) -> None:
        with pytest.raises(MalformedResponseError):
            parse_tone_result(value)

    def test_malformed_optional_fields_coerced(self) -> None:
        result = parse_tone_result(
            {"isHostile": True, "indicators": ["insult", 3, None], "neutralRewrite": 42}
        )

        assert result.indicators == ("insult",)
        assert result.neutral_rewrite == ""


class TestToneClassifier:
    """Tests for ToneClassifier.classify()."""

    async def test_hostile_draft_flagged(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        client = ClassifierClientStub()
        client.enqueue_json(HOSTILE_VERDICT, input_tokens=150, output_tokens=40)
        classifier = ToneClassifier(build_gateway(client, fake_time_authority))

        with capture_logs() as logs:
            result = await classifier.classify("parent-a", "YOU ALWAYS DO THIS!!!")

        assert result.is_hostile
        assert "aggressive blame" in result.indicators
        assert any(entry["event"] == "message_flagged_hostile" for entry in logs)

    async def test_request_shape(self, fake_time_authority: FakeTimeAuthority) -> None:
        client = ClassifierClientStub()
        gateway = build_gateway(client, fake_time_authority)
        classifier = ToneClassifier(gateway)

        await classifier.classify("parent-a", "See you at 5")

        sent = client.requests[0]
        assert sent.system_prompt == TONE_SYSTEM_PROMPT
        assert sent.user_content == TONE_USER_PREFIX + "See you at 5"
        assert sent.model == gateway.config.tone_model
        assert sent.max_tokens == gateway.config.tone_max_tokens

    async def test_unavailable_classifier_falls_back_to_not_hostile(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        client = ClassifierClientStub(TransportFailureError("connection refused"))
        classifier = ToneClassifier(build_gateway(client, fake_time_authority))

        outcome = await classifier.classify_detailed("parent-a", "YOU NEVER LISTEN!!!")

        assert outcome.value.is_hostile is False
        assert outcome.value.from_fallback is True
        assert outcome.degradation == ModerationDegradation.TRANSPORT_FAILURE

    async def test_not_hostile_verdict(self, fake_time_authority: FakeTimeAuthority) -> None:
        classifier = ToneClassifier(
            build_gateway(ClassifierClientStub(), fake_time_authority)
        )

        result = await classifier.classify("parent-a", "Running 10 minutes late")

        assert result.is_hostile is False
        assert result.from_fallback is False
