"""Conversation-level de-escalation advice.

Sends a condensed, redacted view of a family's recent messages to the
classifier and asks for a conflict level and 3-5 calm, child-focused tips.
When the classifier is unavailable the advice is generated locally by the
mediation suggestion engine, so users still get relevant guidance.
"""

from __future__ import annotations

from typing import Any

from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.application.services.moderation_gateway import (
    ModerationGateway,
    ModerationRequest,
)
from hearthline.config.moderation_config import MAX_MEDIATION_CONTEXT
from hearthline.domain.errors.moderation import MalformedResponseError
from hearthline.domain.models.message import Message
from hearthline.domain.models.moderation import (
    ConflictLevel,
    MediationAssistantResult,
    ModerationOperation,
    ModerationOutcome,
)
from hearthline.domain.services.mediation_suggestions import MediationSuggestionEngine

MIN_TIPS = 3
MAX_TIPS = 5
FALLBACK_TOPIC = "co-parenting plans"
TOPIC_LENGTH = 80

GENERIC_TIPS: tuple[str, ...] = (
    "Keep your next message short, factual, and centered on the child's immediate needs.",
    "Use an 'I' statement instead of blame language (for example: 'I'm available after 5 PM').",
    "Offer one specific compromise with a clear date/time to reduce back-and-forth.",
)

MEDIATION_SYSTEM_PROMPT = """You are a co-parenting mediation assistant.
Return ONLY valid JSON in this exact shape:
{
  "conflictLevel": "low" | "medium" | "high",
  "deescalationTips": string[]
}

Rules:
- Provide 3 to 5 practical, calm, child-focused de-escalation tips.
- Avoid legal advice and threats.
- Tips must be neutral and actionable.
- No markdown and no extra keys."""

MEDIATION_USER_PREFIX = (
    "Based on this recent conversation, provide de-escalation tips as JSON only:\n\n"
)


def parse_mediation_result(value: dict[str, Any]) -> MediationAssistantResult:
    """Validate a parsed classifier answer into a MediationAssistantResult.

    Unknown conflict levels coerce to low and non-string tips are dropped.

    Raises:
        MalformedResponseError: If fewer than three usable tips remain.
    """
    raw_level = value.get("conflictLevel")
    if raw_level in (ConflictLevel.MEDIUM.value, ConflictLevel.HIGH.value):
        conflict_level = ConflictLevel(raw_level)
    else:
        conflict_level = ConflictLevel.LOW

    raw_tips = value.get("deescalationTips")
    tips: list[str] = []
    if isinstance(raw_tips, list):
        tips = [tip.strip() for tip in raw_tips if isinstance(tip, str) and tip.strip()]

    if len(tips) < MIN_TIPS:
        raise MalformedResponseError(
            f"Mediation response carried {len(tips)} usable tips, need at least {MIN_TIPS}"
        )
    return MediationAssistantResult(
        conflict_level=conflict_level,
        deescalation_tips=tuple(tips[:MAX_TIPS]),
    )


def condense_conversation(messages: list[Message]) -> str:
    """Render up to 15 newest-first messages as "<sent_at>: <body>" lines."""
    return "\n".join(
        f"{message.sent_at.isoformat()}: {message.body}"
        for message in messages[:MAX_MEDIATION_CONTEXT]
    )


class MediationAdvisor(LoggingMixin):
    """Produces de-escalation tips for a conversation."""

    def __init__(
        self,
        gateway: ModerationGateway,
        time_authority: TimeAuthorityProtocol,
        suggestion_engine: MediationSuggestionEngine | None = None,
    ) -> None:
        """Initialize the advisor.

        Args:
            gateway: Guarded classifier access.
            time_authority: Clock for the local suggestion engine.
            suggestion_engine: Local fallback generator. The default engine
                always yields at least its generic reset suggestion, so the
                low-conflict generic-tips fallback is only reached with an
                engine that can return nothing.
        """
        self._gateway = gateway
        self._time = time_authority
        self._engine = suggestion_engine or MediationSuggestionEngine()
        self._init_logger(component="moderation.mediation")

    def build_fallback(self, messages: list[Message]) -> MediationAssistantResult:
        """Generate advice locally from the most recent message's topic.

        Args:
            messages: Recent messages, newest first.

        Returns:
            Tips derived from suggestion reasonings (medium conflict), topped
            up with generic tips to at least three. Generic tips at low
            conflict only when the engine returns no usable suggestion,
            which the default engine never does.
        """
        recent = messages[:MAX_MEDIATION_CONTEXT]
        topic = recent[0].body[:TOPIC_LENGTH] if recent else FALLBACK_TOPIC
        suggestions = self._engine.generate_suggestions(
            topic=topic, messages=recent, now=self._time.utcnow()
        )
        tips = [s.reasoning for s in suggestions if s.reasoning][:MIN_TIPS]

        if not tips:
            return MediationAssistantResult(
                conflict_level=ConflictLevel.LOW,
                deescalation_tips=GENERIC_TIPS,
                from_fallback=True,
            )

        for generic in GENERIC_TIPS:
            if len(tips) >= MIN_TIPS:
                break
            if generic not in tips:
                tips.append(generic)
        return MediationAssistantResult(
            conflict_level=ConflictLevel.MEDIUM,
            deescalation_tips=tuple(tips),
            from_fallback=True,
        )

    async def advise(
        self, identity: str, recent_messages: list[Message]
    ) -> MediationAssistantResult:
        """Get de-escalation advice for a conversation.

        Args:
            identity: Requesting user (rate limited per identity).
            recent_messages: Up to 15 messages, newest first. Extra messages
                are ignored.

        Returns:
            Classifier advice, or the locally generated fallback.
        """
        outcome = await self.advise_detailed(identity, recent_messages)
        return outcome.value

    async def advise_detailed(
        self, identity: str, recent_messages: list[Message]
    ) -> ModerationOutcome[MediationAssistantResult]:
        """Get advice and report whether it is the local fallback."""
        recent = recent_messages[:MAX_MEDIATION_CONTEXT]
        fallback = self.build_fallback(recent)

        config = self._gateway.config
        request = ModerationRequest(
            operation=ModerationOperation.MEDIATION_ASSISTANT,
            identity=identity,
            model=config.mediation_model,
            max_tokens=config.mediation_max_tokens,
            system_prompt=MEDIATION_SYSTEM_PROMPT,
            user_content=MEDIATION_USER_PREFIX + condense_conversation(recent),
        )
        outcome = await self._gateway.run_detailed(
            request, parse_mediation_result, fallback
        )
        self._log_operation("advise", identity=identity).debug(
            "mediation_advice_ready",
            message_count=len(recent),
            conflict_level=outcome.value.conflict_level.value,
            from_fallback=outcome.is_fallback,
        )
        return outcome
