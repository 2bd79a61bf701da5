"""Pre-send hostility gate.

Asks the classifier whether a draft is hostile before it is sent. The
fallback verdict is "not hostile": classifier unavailability never blocks
family communication. Whether a degraded verdict may still be sent is
decided by the submission workflow from ModerationConfig.fail_open.
"""

from __future__ import annotations

from typing import Any

from hearthline.application.services.base import LoggingMixin
from hearthline.application.services.moderation_gateway import (
    ModerationGateway,
    ModerationRequest,
)
from hearthline.domain.errors.moderation import MalformedResponseError
from hearthline.domain.models.moderation import (
    SAFE_TONE_ANALYSIS,
    ModerationOperation,
    ModerationOutcome,
    ToneAnalysisResult,
)

TONE_SYSTEM_PROMPT = """You are a co-parenting communication safety assistant.
Return ONLY valid JSON with exactly this shape:
{
  "isHostile": boolean,
  "indicators": string[],
  "neutralRewrite": string
}

Rules:
- Flag hostility for insults, threats, contempt, harassment, aggressive blame, all-caps yelling, or repeated aggressive punctuation.
- Keep indicators short and specific.
- If hostile, provide a short neutral rewrite in plain language.
- If not hostile, neutralRewrite should be an empty string.
- No markdown, no commentary, no extra keys."""

TONE_USER_PREFIX = "Analyze this message text and return JSON only:\n\n"


def parse_tone_result(value: dict[str, Any]) -> ToneAnalysisResult:
    """Validate a parsed classifier answer into a ToneAnalysisResult.

    Only isHostile is mandatory. Missing or malformed indicators and
    neutralRewrite are coerced to empty values.

    Raises:
        MalformedResponseError: If isHostile is not a boolean.
    """
    is_hostile = value.get("isHostile")
    if not isinstance(is_hostile, bool):
        raise MalformedResponseError("Tone analysis missing boolean isHostile")

    raw_indicators = value.get("indicators")
    indicators: tuple[str, ...] = ()
    if isinstance(raw_indicators, list):
        indicators = tuple(item for item in raw_indicators if isinstance(item, str))

    neutral_rewrite = value.get("neutralRewrite")
    return ToneAnalysisResult(
        is_hostile=is_hostile,
        indicators=indicators,
        neutral_rewrite=neutral_rewrite if isinstance(neutral_rewrite, str) else "",
    )


class ToneClassifier(LoggingMixin):
    """Classifies a draft as hostile or not through the moderation gateway."""

    def __init__(self, gateway: ModerationGateway) -> None:
        self._gateway = gateway
        self._init_logger(component="moderation.tone")

    async def classify(self, identity: str, message_text: str) -> ToneAnalysisResult:
        """Classify one draft.

        Args:
            identity: Sender identity (rate limited per identity).
            message_text: The draft text, unredacted.

        Returns:
            The classifier's verdict, or the non-hostile fallback with
            from_fallback set.
        """
        outcome = await self.classify_detailed(identity, message_text)
        return outcome.value

    async def classify_detailed(
        self, identity: str, message_text: str
    ) -> ModerationOutcome[ToneAnalysisResult]:
        """Classify one draft and report whether the verdict is a fallback."""
        config = self._gateway.config
        request = ModerationRequest(
            operation=ModerationOperation.TONE_ANALYSIS,
            identity=identity,
            model=config.tone_model,
            max_tokens=config.tone_max_tokens,
            system_prompt=TONE_SYSTEM_PROMPT,
            user_content=TONE_USER_PREFIX + message_text,
        )
        fallback = ToneAnalysisResult(
            is_hostile=SAFE_TONE_ANALYSIS.is_hostile,
            indicators=SAFE_TONE_ANALYSIS.indicators,
            neutral_rewrite=SAFE_TONE_ANALYSIS.neutral_rewrite,
            from_fallback=True,
        )
        outcome = await self._gateway.run_detailed(request, parse_tone_result, fallback)

        if outcome.value.is_hostile:
            self._log_operation("classify", identity=identity).info(
                "message_flagged_hostile",
                indicator_count=len(outcome.value.indicators),
            )
        return outcome
