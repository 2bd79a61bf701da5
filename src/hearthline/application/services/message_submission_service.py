"""Message submission workflow: validation, tone gate and chain append.

State Machine:
    DRAFTED -> VALIDATED -> TONE_CHECKED -> BLOCKED
                                         -> LINKED -> PERSISTED
    DRAFTED -> REJECTED (empty or too long)
    TONE_CHECKED -> REJECTED (classifier unavailable, fail-closed only)

Outcomes:
- sent: message linked into the thread's chain and persisted
- blocked: classifier judged the draft hostile; nothing stored, the draft,
  indicators and a neutral rewrite are handed back
- rejected: draft needs correcting (or screening unavailable under
  fail-closed); the draft is handed back

Persistence failure is not an outcome: it propagates to the caller.
"""

from __future__ import annotations

from uuid import UUID

from hearthline.application.ports.message_repository import ThreadRepositoryProtocol
from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.application.services.message_chain_service import MessageChain
from hearthline.application.services.tone_classifier_service import ToneClassifier
from hearthline.config.moderation_config import (
    DEFAULT_MESSAGING_CONFIG,
    DEFAULT_MODERATION_CONFIG,
    MessagingConfig,
    ModerationConfig,
)
from hearthline.domain.errors.submission import (
    DraftRejectionReason,
    DraftValidationError,
    InvalidSubmissionTransitionError,
    ThreadNotFoundError,
)
from hearthline.domain.models.message import MessageThread, StoredToneAnalysis
from hearthline.domain.models.moderation import ModerationDegradation
from hearthline.domain.models.submission import (
    SubmissionOutcome,
    SubmissionState,
    SubmissionStatus,
)
from hearthline.infrastructure.monitoring.metrics import get_metrics_collector


class _Submission:
    """Tracks one send attempt through the state machine."""

    def __init__(self) -> None:
        self.state = SubmissionState.DRAFTED

    def transition(self, to_state: SubmissionState) -> None:
        if to_state not in self.state.valid_transitions():
            raise InvalidSubmissionTransitionError(self.state.value, to_state.value)
        self.state = to_state


class MessageSubmissionWorkflow(LoggingMixin):
    """User-facing send operation for family messages."""

    def __init__(
        self,
        tone_classifier: ToneClassifier,
        message_chain: MessageChain,
        thread_repository: ThreadRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        moderation_config: ModerationConfig = DEFAULT_MODERATION_CONFIG,
        messaging_config: MessagingConfig = DEFAULT_MESSAGING_CONFIG,
    ) -> None:
        """Initialize the workflow.

        Args:
            tone_classifier: Pre-send hostility gate.
            message_chain: Hash-linked append and store.
            thread_repository: Thread lookup and default-thread creation.
            time_authority: Source of sent_at timestamps.
            moderation_config: Supplies the fail-open policy.
            messaging_config: Body length limit and default thread subject.
        """
        self._tone = tone_classifier
        self._chain = message_chain
        self._threads = thread_repository
        self._time = time_authority
        self._fail_open = moderation_config.fail_open
        self._messaging = messaging_config

        self._init_logger(component="messaging.submission")

    def validate_draft(self, body: str) -> str:
        """Trim and bound-check a draft.

        Returns:
            The trimmed body.

        Raises:
            DraftValidationError: Empty after trimming, or too long.
        """
        trimmed = body.strip()
        if not trimmed:
            raise DraftValidationError(DraftRejectionReason.EMPTY, draft=body)
        if len(trimmed) > self._messaging.max_body_length:
            raise DraftValidationError(
                DraftRejectionReason.TOO_LONG,
                draft=body,
                max_length=self._messaging.max_body_length,
            )
        return trimmed

    async def submit(
        self,
        family_id: UUID,
        sender_id: UUID,
        body: str,
        thread_id: UUID | None = None,
    ) -> SubmissionOutcome:
        """Send one message.

        Args:
            family_id: Sender's family.
            sender_id: Sending family member.
            body: Draft text as typed.
            thread_id: Target thread; the family's default thread when None.

        Returns:
            SubmissionOutcome with status sent, blocked or rejected.

        Raises:
            ThreadNotFoundError: thread_id is unknown or not the family's.
            ChainPersistenceError: The linked message could not be stored.
        """
        log = self._log_operation(
            "submit", family_id=str(family_id), sender_id=str(sender_id)
        )
        submission = _Submission()

        try:
            trimmed = self.validate_draft(body)
        except DraftValidationError as e:
            submission.transition(SubmissionState.REJECTED)
            log.info("draft_rejected", reason=e.reason.value)
            return SubmissionOutcome(
                status=SubmissionStatus.REJECTED,
                state=submission.state,
                draft=e.draft,
                rejection_reason=e.reason,
                error_message=e.user_message,
            )
        submission.transition(SubmissionState.VALIDATED)

        # Explicit threads are checked before spending a classifier call
        thread: MessageThread | None = None
        if thread_id is not None:
            thread = await self._get_thread(family_id, thread_id)

        tone = await self._tone.classify_detailed(str(sender_id), trimmed)
        submission.transition(SubmissionState.TONE_CHECKED)
        verdict = tone.value

        if verdict.is_hostile:
            submission.transition(SubmissionState.BLOCKED)
            get_metrics_collector().increment_messages_blocked()
            log.info("message_blocked", indicator_count=len(verdict.indicators))
            return SubmissionOutcome(
                status=SubmissionStatus.BLOCKED,
                state=submission.state,
                draft=body,
                indicators=verdict.indicators,
                neutral_rewrite=verdict.neutral_rewrite,
            )

        # Disabled moderation is not an outage
        unavailable = (
            tone.is_fallback
            and tone.degradation is not ModerationDegradation.FEATURE_DISABLED
        )
        if unavailable and not self._fail_open:
            submission.transition(SubmissionState.REJECTED)
            error = DraftValidationError(
                DraftRejectionReason.MODERATION_UNAVAILABLE, draft=body
            )
            log.warning(
                "draft_rejected",
                reason=error.reason.value,
                degradation=tone.degradation.value if tone.degradation else None,
            )
            return SubmissionOutcome(
                status=SubmissionStatus.REJECTED,
                state=submission.state,
                draft=body,
                rejection_reason=error.reason,
                error_message=error.user_message,
                moderation_degraded=True,
            )

        if thread is None:
            thread = await self._threads.find_or_create(
                family_id, self._messaging.default_thread_subject
            )
        submission.transition(SubmissionState.LINKED)
        message = await self._chain.append_and_store(
            thread_id=thread.id,
            sender_id=sender_id,
            family_id=family_id,
            body=trimmed,
            sent_at=self._time.utcnow(),
            tone_analysis=StoredToneAnalysis(
                is_hostile=False, indicators=verdict.indicators
            ),
        )
        submission.transition(SubmissionState.PERSISTED)

        log.info(
            "message_sent",
            thread_id=str(thread.id),
            chain_index=message.chain_index,
            moderation_degraded=tone.is_fallback,
        )
        return SubmissionOutcome(
            status=SubmissionStatus.SENT,
            state=submission.state,
            message=message,
            moderation_degraded=tone.is_fallback,
        )

    async def _get_thread(self, family_id: UUID, thread_id: UUID) -> MessageThread:
        thread = await self._threads.get(thread_id)
        if thread is None or thread.family_id != family_id:
            raise ThreadNotFoundError(thread_id)
        return thread
