"""Moderation gateway: the single guarded path to the remote classifier.

Every classifier operation runs through ModerationGateway.run, which in
order:

1. Returns the fallback if moderation is disabled (feature flag).
2. Returns the fallback if the identity is over its rate limit.
3. Returns the fallback if the circuit breaker is open.
4. Redacts PII from the user content.
5. Issues exactly one classifier call, bounded by request_timeout_seconds.
6. On transport failure: records a breaker failure, counts the error,
   logs, and returns the fallback.
7. On success: extracts the JSON object, validates it with the caller's
   function (failures here are handled as step 6), records a breaker
   success, observes the duration, logs token usage and estimated cost,
   and returns the validated value.

The gateway never raises to its caller except for task cancellation,
which is first recorded as a breaker failure and then re-raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from hearthline.application.ports.classifier_client import (
    ClassifierClientProtocol,
    ClassifierRequest,
    ClassifierResponse,
)
from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.application.services.circuit_breaker_service import CircuitBreaker
from hearthline.application.services.rate_limiter_service import ModerationRateLimiter
from hearthline.config.moderation_config import DEFAULT_MODERATION_CONFIG, ModerationConfig
from hearthline.domain.errors.moderation import (
    BreakerOpenError,
    FeatureDisabledError,
    MalformedResponseError,
    RateLimitedError,
    TransportFailureError,
)
from hearthline.domain.models.moderation import (
    ModerationDegradation,
    ModerationOperation,
    ModerationOutcome,
)
from hearthline.domain.services.json_extraction import extract_json_object
from hearthline.domain.services.redaction import Redactor
from hearthline.infrastructure.monitoring.metrics import get_metrics_collector

T = TypeVar("T")

# USD per million tokens: (input, output). Unknown models are costed at 0.
MODEL_COST_PER_MILLION: dict[str, tuple[float, float]] = {
    "claude-3-5-haiku-latest": (0.8, 4.0),
    "claude-3-5-sonnet-latest": (3.0, 15.0),
}

ERROR_SOURCE = "classifier"


def estimate_cost_usd(model: str, input_tokens: int, output_tokens: int) -> float:
    """Estimate the spend of one classifier call.

    Args:
        model: Model identifier the call was billed against.
        input_tokens: Prompt tokens billed.
        output_tokens: Completion tokens billed.

    Returns:
        Estimated cost in USD, rounded to 6 decimal places.
    """
    pricing = MODEL_COST_PER_MILLION.get(model)
    if pricing is None:
        return 0.0
    input_usd, output_usd = pricing
    cost = input_tokens * input_usd / 1_000_000 + output_tokens * output_usd / 1_000_000
    return round(cost, 6)


@dataclass(frozen=True)
class ModerationRequest:
    """One classifier operation as seen by the gateway.

    Attributes:
        operation: Which classifier operation this is.
        identity: Caller identity for rate limiting and logs.
        model: Model identifier.
        max_tokens: Output bound.
        system_prompt: Instruction mandating a single JSON object response.
        user_content: Unredacted user content; redacted by the gateway.
    """

    operation: ModerationOperation
    identity: str
    model: str
    max_tokens: int
    system_prompt: str
    user_content: str


class ModerationGateway(LoggingMixin):
    """Guarded, fail-soft access to the remote classifier."""

    def __init__(
        self,
        client: ClassifierClientProtocol,
        rate_limiter: ModerationRateLimiter,
        circuit_breaker: CircuitBreaker,
        time_authority: TimeAuthorityProtocol,
        config: ModerationConfig = DEFAULT_MODERATION_CONFIG,
        redactor: Redactor | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            client: Classifier transport.
            rate_limiter: Per-identity admission control.
            circuit_breaker: Shared breaker for all classifier operations.
            time_authority: Monotonic clock for duration measurement.
            config: Feature flag and request timeout.
            redactor: PII redactor applied to user content.
        """
        self._client = client
        self._rate_limiter = rate_limiter
        self._breaker = circuit_breaker
        self._time = time_authority
        self._config = config
        self._redactor = redactor or Redactor()

        self._init_logger(component="moderation")

    @property
    def config(self) -> ModerationConfig:
        return self._config

    async def run(
        self,
        request: ModerationRequest,
        validate: Callable[[dict[str, Any]], T],
        fallback: T,
    ) -> T:
        """Run one classifier operation, returning the fallback on any failure.

        Args:
            request: The operation to run.
            validate: Converts the parsed JSON object into T, raising on bad shape.
            fallback: Value returned whenever the classifier cannot be used.

        Returns:
            The validated classifier result, or fallback.
        """
        outcome = await self.run_detailed(request, validate, fallback)
        return outcome.value

    async def run_detailed(
        self,
        request: ModerationRequest,
        validate: Callable[[dict[str, Any]], T],
        fallback: T,
    ) -> ModerationOutcome[T]:
        """Same as run, but also reports why a fallback was returned.

        Raises:
            asyncio.CancelledError: If the calling task is cancelled while the
                classifier call is in flight (after recording a breaker failure).
        """
        operation = request.operation.value
        log = self._log_operation(
            "run", moderation_operation=operation, identity=request.identity
        )
        metrics = get_metrics_collector()

        if not self._config.is_active:
            log.debug("moderation_skipped", reason=str(FeatureDisabledError()))
            return self._fallback(fallback, request, ModerationDegradation.FEATURE_DISABLED)

        decision = self._rate_limiter.admit(request.identity)
        if not decision.allowed:
            metrics.increment_rate_limit_hits()
            error = RateLimitedError(request.identity, decision.retry_after_seconds or 1)
            log.warning(
                "moderation_rate_limited",
                retry_after_seconds=error.retry_after_seconds,
                limit_per_window=self._rate_limiter.capacity,
            )
            return self._fallback(fallback, request, ModerationDegradation.RATE_LIMITED)

        breaker_open = self._breaker.is_open()
        metrics.set_circuit_open(breaker_open)
        if breaker_open:
            error_open = BreakerOpenError(self._breaker.open_for_seconds())
            log.warning(
                "moderation_skipped_breaker_open",
                open_for_seconds=round(error_open.open_for_seconds, 1),
            )
            return self._fallback(fallback, request, ModerationDegradation.BREAKER_OPEN)

        classifier_request = ClassifierRequest(
            model=request.model,
            max_tokens=request.max_tokens,
            system_prompt=request.system_prompt,
            user_content=self._redactor.redact(request.user_content),
            temperature=0.0,
        )

        started_at = self._time.monotonic()
        try:
            response = await self._call_classifier(classifier_request)
            parsed = extract_json_object(response.text)
            validated = validate(parsed)
        except asyncio.CancelledError:
            self._breaker.record_outcome(False)
            metrics.increment_errors(ERROR_SOURCE, operation)
            log.warning("moderation_request_cancelled")
            raise
        except TransportFailureError as e:
            return self._record_failure(
                fallback, request, ModerationDegradation.TRANSPORT_FAILURE, e
            )
        except (MalformedResponseError, ValueError, TypeError, KeyError) as e:
            return self._record_failure(
                fallback, request, ModerationDegradation.MALFORMED_RESPONSE, e
            )
        except Exception as e:
            # Any other client failure is still a failed call, never a crash
            return self._record_failure(
                fallback, request, ModerationDegradation.TRANSPORT_FAILURE, e
            )

        elapsed = self._time.monotonic() - started_at
        self._breaker.record_outcome(True)
        metrics.set_circuit_open(self._breaker.is_open())
        metrics.observe_moderation_duration(operation, elapsed)

        cost = estimate_cost_usd(request.model, response.input_tokens, response.output_tokens)
        metrics.record_token_usage(
            operation, response.input_tokens, response.output_tokens, cost
        )
        log.info(
            "classifier_token_usage",
            model=request.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            total_tokens=response.total_tokens,
            estimated_cost_usd=cost,
            duration_seconds=round(elapsed, 4),
        )
        return ModerationOutcome(value=validated)

    async def _call_classifier(self, request: ClassifierRequest) -> ClassifierResponse:
        try:
            return await asyncio.wait_for(
                self._client.complete(request),
                timeout=self._config.request_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise TransportFailureError(
                f"Classifier request timed out after "
                f"{self._config.request_timeout_seconds}s"
            ) from e

    def _record_failure(
        self,
        fallback: T,
        request: ModerationRequest,
        reason: ModerationDegradation,
        error: Exception,
    ) -> ModerationOutcome[T]:
        operation = request.operation.value
        self._breaker.record_outcome(False)
        metrics = get_metrics_collector()
        metrics.increment_errors(ERROR_SOURCE, operation)
        metrics.set_circuit_open(self._breaker.is_open())
        self._log_operation(
            "run", moderation_operation=operation, identity=request.identity
        ).error(
            "moderation_request_failed",
            reason=reason.value,
            error=error,
            status_code=getattr(error, "status_code", None),
        )
        return self._fallback(fallback, request, reason)

    def _fallback(
        self,
        fallback: T,
        request: ModerationRequest,
        reason: ModerationDegradation,
    ) -> ModerationOutcome[T]:
        get_metrics_collector().increment_moderation_fallbacks(
            request.operation.value, reason.value
        )
        return ModerationOutcome(value=fallback, degradation=reason)
