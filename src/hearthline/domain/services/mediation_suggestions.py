"""Deterministic mediation suggestion engine.

Given a disputed topic and the recent thread, generates neutral,
child-centric drafts either family member could send. Suggestions are
template-based and rule-driven, not model-generated, so they stay
auditable and identical across families. The mediation advisor uses this
engine as its local fallback when the remote classifier is unavailable.

Pipeline:
1. Match the topic against template groups by keyword
2. Extract times, amounts and dates from the thread
3. Fill template placeholders from that context
4. Score each draft for feasibility (0-100), drop anything under 60
5. Sort by score and return the top 3 (a generic reset if nothing matched)

Feasibility scoring:
    specific date/time +15, mentions the child +15, collaborative framing +20,
    acknowledges the other parent +10, time-limited +10,
    references the agreed schedule/court order +30, accusatory framing -30
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from hearthline.domain.models.mediation_suggestion import (
    DisputeCategory,
    MediationSuggestion,
    NeutralityReport,
)
from hearthline.domain.models.message import Message

MIN_FEASIBILITY_SCORE: int = 60
MAX_SUGGESTIONS: int = 3
OFFER_VALIDITY = timedelta(days=7)


@dataclass(frozen=True)
class SuggestionTemplate:
    """One fill-in-the-blanks draft."""

    text: str
    reasoning: str
    base_score: int


@dataclass(frozen=True)
class TemplateGroup:
    """Templates sharing a topic matcher and category."""

    id: str
    category: DisputeCategory
    pattern: re.Pattern[str]
    templates: tuple[SuggestionTemplate, ...]


SUGGESTION_TEMPLATES: tuple[TemplateGroup, ...] = (
    TemplateGroup(
        id="schedule_holiday",
        category=DisputeCategory.SCHEDULE_ADJUSTMENT,
        pattern=re.compile(
            r"\b(thanksgiving|christmas|easter|halloween|birthday|holiday)\b", re.I
        ),
        templates=(
            SuggestionTemplate(
                text=(
                    "Regarding this year's {{holiday}}, I am willing to adjust the "
                    "transition time to {{newTime}} instead of {{oldTime}} to accommodate "
                    "{{reasoning}}. This would still respect the agreed custody schedule. "
                    "Please let me know if this works for your plans."
                ),
                reasoning=(
                    "Addresses specific timing while respecting the existing custody agreement"
                ),
                base_score=75,
            ),
            SuggestionTemplate(
                text=(
                    "I propose we alternate {{holiday}} custody each year, starting with "
                    "{{year}}: I take {{year}}, you take {{nextYear}}, and so on. This gives "
                    "both of us predictable planning for a meaningful holiday."
                ),
                reasoning="Creates a fair pattern that both parents can plan around",
                base_score=80,
            ),
            SuggestionTemplate(
                text=(
                    "For this {{holiday}}, I'm open to extending your time by {{hours}} hours "
                    "if you can commit to the return time by {{time}}. Our child's continuity "
                    "of care is the priority."
                ),
                reasoning="Offers flexibility while maintaining firmness on return times",
                base_score=70,
            ),
        ),
    ),
    TemplateGroup(
        id="financial_split",
        category=DisputeCategory.FINANCIAL,
        pattern=re.compile(
            r"\b(fee|expense|cost|payment|tuition|medical|doctor)\b", re.I
        ),
        templates=(
            SuggestionTemplate(
                text=(
                    "I'm willing to cover {{percentage}}% of the {{expense}} cost "
                    "({{amount}}) as outlined in our agreement. I can pay by {{date}} if you "
                    "send me the invoice."
                ),
                reasoning="Acknowledges the shared cost and commits to a specific timeline",
                base_score=75,
            ),
            SuggestionTemplate(
                text=(
                    "For {{expense}}, I propose we split the cost 50/50. I'll cover "
                    "{{ourShare}} and you cover {{theirShare}}. Once you receive the bill, "
                    "please forward it and I'll pay within 5 business days."
                ),
                reasoning="Fair split with clear payment terms",
                base_score=78,
            ),
            SuggestionTemplate(
                text=(
                    "I understand {{expense}} is important for our child's development. "
                    "While I'm unable to cover the full {{amount}}, I can contribute "
                    "{{ourShare}} toward the {{expense}}. The remaining {{theirShare}} "
                    "would be your responsibility."
                ),
                reasoning="Honest about limitations while still contributing; avoids blame",
                base_score=65,
            ),
        ),
    ),
    TemplateGroup(
        id="medical_decision",
        category=DisputeCategory.MEDICAL_EDUCATION,
        pattern=re.compile(
            r"\b(doctor|medical|health|therapy|medication|vaccine|consent)\b", re.I
        ),
        templates=(
            SuggestionTemplate(
                text=(
                    "For this {{medicalIssue}}, I propose we jointly consult with "
                    "{{provider}} to make the best decision for our child. I'm happy to "
                    "attend the appointment with you or to hear your feedback after you "
                    "meet with them."
                ),
                reasoning="Establishes shared decision-making for major health issues",
                base_score=82,
            ),
            SuggestionTemplate(
                text=(
                    "I've made an appointment with {{provider}} on {{date}} at {{time}} for "
                    "our child's {{medicalIssue}}. I'd like you to either attend or to join "
                    "a follow-up call to discuss the results and next steps."
                ),
                reasoning="Takes action while keeping the other parent informed and involved",
                base_score=75,
            ),
        ),
    ),
    TemplateGroup(
        id="activity_decision",
        category=DisputeCategory.ACTIVITY_FEES,
        pattern=re.compile(
            r"\b(soccer|sport|activity|class|lesson|club|fee|signup)\b", re.I
        ),
        templates=(
            SuggestionTemplate(
                text=(
                    "I think {{activity}} is a great opportunity for our child. The cost is "
                    "{{amount}}. I'm willing to cover {{weShare}} if you can cover "
                    "{{theyShare}}. The registration deadline is {{date}}."
                ),
                reasoning="Proposes cost-sharing for child's enrichment with clear deadlines",
                base_score=77,
            ),
            SuggestionTemplate(
                text=(
                    "I prefer not to enroll our child in {{activity}} at this time because "
                    "{{reason}}. Perhaps we could revisit this in {{timeframe}} when "
                    "circumstances change."
                ),
                reasoning=(
                    "Respectfully declines while leaving door open for future reconsideration"
                ),
                base_score=60,
            ),
        ),
    ),
    TemplateGroup(
        id="miscommunication_reset",
        category=DisputeCategory.MISCOMMUNICATION,
        pattern=re.compile(r"\b(misunderstand|confused|upset|argument|disagree)\b", re.I),
        templates=(
            SuggestionTemplate(
                text=(
                    "I realize we may have misunderstood each other's intentions. I want to "
                    "clarify: I'm committed to what's best for our child. Can we reset and "
                    "discuss this {{topic}} calmly? I'm happy to listen to your perspective."
                ),
                reasoning="Acknowledges the misunderstanding and resets tone without blame",
                base_score=72,
            ),
            SuggestionTemplate(
                text=(
                    "I may have reacted too quickly. Let me restate my position more "
                    "clearly: {{clearedUpPosition}}. I'd appreciate your thoughts on how we "
                    "can move forward together."
                ),
                reasoning="Takes responsibility and reframes the issue constructively",
                base_score=70,
            ),
        ),
    ),
)

_HOLIDAY = re.compile(r"thanksgiving|christmas|easter|halloween", re.I)
_TIME_OF_DAY = re.compile(r"\b(\d{1,2}):(\d{2})\s*(?:am|pm)\b", re.I)
_AMOUNT = re.compile(r"\$([\d,]+\.?\d*)")
_MONTH_DAY = re.compile(
    r"\b(jan|feb|march|apr|may|june|july|aug|sep|oct|nov|dec)[a-z]* \d{1,2}\b", re.I
)

_MONTH_KEYWORD = re.compile(r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b", re.I)
_ISO_DATE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
_TIME_SLOT = re.compile(r"\b\d{1,2}:\d{2}\b")
_MENTIONS_CHILD = re.compile(r"\bour child|child's|the child\b", re.I)
_COLLABORATIVE = re.compile(r"\bi'?m willing|i propose|suggest|can we|let's\b", re.I)
_ACKNOWLEDGES = re.compile(r"\bi understand|you|your\b", re.I)
_TIME_LIMITED = re.compile(r"\bby|deadline|until|expires|valid\b", re.I)
_AGREEMENT = re.compile(r"\bagreed|schedule|court|arrangement\b", re.I)
_ACCUSATORY = re.compile(r"\byou always|you never|your fault|unacceptable\b", re.I)

_DEMANDS = re.compile(r"\byou must|you have to|you need to\b", re.I)
_THREATS = re.compile(r"\bi'll get you in court|i'm calling dcfs\b", re.I)
_BLAME = re.compile(r"\byou always|you never|your fault\b", re.I)
_PERCENT = re.compile(r"\b\d{1,2}%")
_DOLLARS = re.compile(r"\$\d+")
_CHILD_FIRST = re.compile(r"\bour child|child's best\b", re.I)


def extract_context(messages: list[Message], topic: str, now: datetime) -> dict[str, str]:
    """Extract placeholder values from the topic and thread.

    Args:
        messages: Recent thread messages.
        topic: Disputed topic.
        now: Current time (source of the default date).

    Returns:
        Placeholder name -> value.
    """
    holiday = _HOLIDAY.search(topic)
    context: dict[str, str] = {
        "topic": topic,
        "holiday": holiday.group(0) if holiday else "event",
        "date": now.date().isoformat(),
    }

    full_thread = " ".join(message.body for message in messages)

    time_match = _TIME_OF_DAY.search(full_thread)
    if time_match:
        context["newTime"] = time_match.group(0)

    amount_match = _AMOUNT.search(full_thread)
    if amount_match:
        context["amount"] = amount_match.group(1)

    date_match = _MONTH_DAY.search(full_thread)
    if date_match:
        context["eventDate"] = date_match.group(0)

    return context


def score_feasibility(draft: str) -> int:
    """Score a filled draft for how easy it is to agree to (0-100)."""
    score = 0
    if _MONTH_KEYWORD.search(draft) or _ISO_DATE.search(draft) or _TIME_SLOT.search(draft):
        score += 15
    if _MENTIONS_CHILD.search(draft):
        score += 15
    if _COLLABORATIVE.search(draft):
        score += 20
    if _ACKNOWLEDGES.search(draft):
        score += 10
    if _TIME_LIMITED.search(draft):
        score += 10
    if _AGREEMENT.search(draft):
        score += 30
    if _ACCUSATORY.search(draft):
        score -= 30
    return max(0, min(100, score))


def fill_template(template: str, context: dict[str, str]) -> str:
    """Replace {{name}} placeholders present in context; leave the rest."""
    filled = template
    for key, value in context.items():
        filled = filled.replace("{{" + key + "}}", value)
    return filled


class MediationSuggestionEngine:
    """Template-driven generator of neutral drafts.

    Example:
        engine = MediationSuggestionEngine()
        suggestions = engine.generate_suggestions(
            topic="Thanksgiving schedule",
            messages=recent_messages,
            now=time_authority.utcnow(),
        )
    """

    def __init__(self, templates: tuple[TemplateGroup, ...] = SUGGESTION_TEMPLATES) -> None:
        self._templates = templates

    def generate_suggestions(
        self,
        topic: str,
        messages: list[Message],
        now: datetime,
    ) -> list[MediationSuggestion]:
        """Generate up to three suggestions for a disputed topic.

        Args:
            topic: Disputed topic, typically the start of the latest message.
            messages: Recent thread messages.
            now: Current time, used for default dates and offer expiry.

        Returns:
            Suggestions sorted by feasibility score, best first. Never empty:
            a generic reset suggestion is returned when no template group
            matches the topic.
        """
        context = extract_context(messages, topic, now)
        expires_at = now + OFFER_VALIDITY

        suggestions: list[MediationSuggestion] = []
        for group in self._templates:
            if not group.pattern.search(topic):
                continue
            for index, template in enumerate(group.templates):
                draft_text = fill_template(template.text, context)
                score = score_feasibility(draft_text)
                if score < MIN_FEASIBILITY_SCORE:
                    continue
                suggestions.append(
                    MediationSuggestion(
                        id=f"{group.id}-{index}",
                        template_id=group.id,
                        category=group.category,
                        feasibility_score=score,
                        draft_text=draft_text,
                        reasoning=template.reasoning,
                        expires_at=expires_at,
                    )
                )

        # Stable sort keeps template order among equal scores
        suggestions.sort(key=lambda s: s.feasibility_score, reverse=True)
        if not suggestions:
            suggestions.append(self._generic_reset(topic, expires_at))
        return suggestions[:MAX_SUGGESTIONS]

    def validate_neutrality(self, draft: str) -> NeutralityReport:
        """Score a user's own draft for neutrality before sending.

        Args:
            draft: Text the user intends to send.

        Returns:
            Score (0-100) and concrete feedback.
        """
        feedback: list[str] = []
        score = 100

        if _BLAME.search(draft):
            feedback.append("Avoid accusatory language like 'you always' or 'you never'.")
            score -= 30

        if _DEMANDS.search(draft):
            feedback.append(
                "Rephrase demands as proposals ('I propose' or 'Would you be open to')"
            )
            score -= 15

        if _THREATS.search(draft):
            feedback.append(
                "Legal threats or agency mentions will escalate conflict. "
                "Reframe through proper legal channels."
            )
            score -= 50

        is_specific = any(
            pattern.search(draft) for pattern in (_TIME_SLOT, _ISO_DATE, _PERCENT, _DOLLARS)
        )
        if not is_specific:
            feedback.append("More specific dates/times/amounts strengthen the offer.")
            score -= 5

        if _CHILD_FIRST.search(draft):
            score += 10

        return NeutralityReport(score=max(0, min(100, score)), feedback=tuple(feedback))

    @staticmethod
    def _generic_reset(topic: str, expires_at: datetime) -> MediationSuggestion:
        return MediationSuggestion(
            id="generic-reset",
            template_id="miscommunication_reset",
            category=DisputeCategory.MISCOMMUNICATION,
            feasibility_score=65,
            draft_text=(
                f"I want to work together to resolve this. Can we discuss {topic} calmly "
                "and focus on what's best for our child? I'm open to your perspective."
            ),
            reasoning="Generic reset to restore positive communication",
            expires_at=expires_at,
        )
