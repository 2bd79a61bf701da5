"""Messaging API dependencies.

Singleton wiring of the moderation and messaging services. Storage is the
in-memory stub; the classifier client is the Anthropic adapter unless a
test injects another one with set_classifier_client. The adapter shares the
httpx client the app lifespan registers with set_http_client.
"""

from __future__ import annotations

from uuid import UUID

import httpx
from fastapi import Header, HTTPException

from hearthline.application.ports.classifier_client import ClassifierClientProtocol
from hearthline.application.ports.message_repository import (
    MessageRepositoryProtocol,
    ThreadRepositoryProtocol,
)
from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.chain_verification_service import (
    ChainVerificationService,
)
from hearthline.application.services.circuit_breaker_service import CircuitBreaker
from hearthline.application.services.mediation_advisor_service import MediationAdvisor
from hearthline.application.services.message_chain_service import MessageChain
from hearthline.application.services.message_submission_service import (
    MessageSubmissionWorkflow,
)
from hearthline.application.services.moderation_gateway import ModerationGateway
from hearthline.application.services.rate_limiter_service import ModerationRateLimiter
from hearthline.application.services.time_authority_service import SystemTimeAuthority
from hearthline.application.services.tone_classifier_service import ToneClassifier
from hearthline.config.moderation_config import MessagingConfig, ModerationConfig
from hearthline.infrastructure.adapters.anthropic_classifier_client import (
    AnthropicClassifierClient,
)
from hearthline.infrastructure.stubs.message_repository_stub import (
    MessageRepositoryStub,
    ThreadRepositoryStub,
)

USER_ID_HEADER = "X-User-Id"

_moderation_config: ModerationConfig | None = None
_messaging_config: MessagingConfig | None = None
_time_authority: TimeAuthorityProtocol | None = None
_classifier_client: ClassifierClientProtocol | None = None
_http_client: httpx.AsyncClient | None = None
_message_repository: MessageRepositoryStub | None = None
_thread_repository: ThreadRepositoryStub | None = None
_rate_limiter: ModerationRateLimiter | None = None
_circuit_breaker: CircuitBreaker | None = None
_gateway: ModerationGateway | None = None
_message_chain: MessageChain | None = None
_submission_workflow: MessageSubmissionWorkflow | None = None
_mediation_advisor: MediationAdvisor | None = None
_verification_service: ChainVerificationService | None = None


def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> UUID:
    """Resolve the caller's identity.

    Authentication happens upstream; this only reads the identity the
    gateway forwards.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail=f"Missing {USER_ID_HEADER} header")
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=401, detail=f"Invalid {USER_ID_HEADER} header"
        ) from None


def get_moderation_config() -> ModerationConfig:
    global _moderation_config
    if _moderation_config is None:
        _moderation_config = ModerationConfig.from_environment()
    return _moderation_config


def get_messaging_config() -> MessagingConfig:
    global _messaging_config
    if _messaging_config is None:
        _messaging_config = MessagingConfig.from_environment()
    return _messaging_config


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_classifier_client() -> ClassifierClientProtocol:
    global _classifier_client
    if _classifier_client is None:
        _classifier_client = AnthropicClassifierClient(
            get_moderation_config(), http_client=_http_client
        )
    return _classifier_client


def get_http_client() -> httpx.AsyncClient | None:
    """Get the shared HTTP client, if the app lifespan registered one."""
    return _http_client


def get_message_repository() -> MessageRepositoryProtocol:
    global _message_repository
    if _message_repository is None:
        _message_repository = MessageRepositoryStub()
    return _message_repository


def get_thread_repository() -> ThreadRepositoryProtocol:
    global _thread_repository
    if _thread_repository is None:
        _thread_repository = ThreadRepositoryStub()
    return _thread_repository


def get_circuit_breaker() -> CircuitBreaker:
    global _circuit_breaker
    if _circuit_breaker is None:
        _circuit_breaker = CircuitBreaker(get_time_authority(), get_moderation_config())
    return _circuit_breaker


def get_moderation_gateway() -> ModerationGateway:
    """Get the gateway; rate limiter and breaker are process-wide singletons."""
    global _gateway, _rate_limiter
    if _gateway is None:
        config = get_moderation_config()
        time_authority = get_time_authority()
        if _rate_limiter is None:
            _rate_limiter = ModerationRateLimiter(time_authority, config)
        _gateway = ModerationGateway(
            client=get_classifier_client(),
            rate_limiter=_rate_limiter,
            circuit_breaker=get_circuit_breaker(),
            time_authority=time_authority,
            config=config,
        )
    return _gateway


def get_submission_workflow() -> MessageSubmissionWorkflow:
    global _submission_workflow, _message_chain
    if _submission_workflow is None:
        if _message_chain is None:
            _message_chain = MessageChain(get_message_repository())
        _submission_workflow = MessageSubmissionWorkflow(
            tone_classifier=ToneClassifier(get_moderation_gateway()),
            message_chain=_message_chain,
            thread_repository=get_thread_repository(),
            time_authority=get_time_authority(),
            moderation_config=get_moderation_config(),
            messaging_config=get_messaging_config(),
        )
    return _submission_workflow


def get_mediation_advisor() -> MediationAdvisor:
    global _mediation_advisor
    if _mediation_advisor is None:
        _mediation_advisor = MediationAdvisor(
            get_moderation_gateway(), get_time_authority()
        )
    return _mediation_advisor


def get_chain_verification_service() -> ChainVerificationService:
    global _verification_service
    if _verification_service is None:
        _verification_service = ChainVerificationService(
            get_message_repository(), get_time_authority()
        )
    return _verification_service


def set_moderation_config(config: ModerationConfig) -> None:
    """Set custom moderation config (for testing)."""
    global _moderation_config
    _moderation_config = config


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom time authority (for testing)."""
    global _time_authority
    _time_authority = time_authority


def set_classifier_client(client: ClassifierClientProtocol) -> None:
    """Set custom classifier client (for testing)."""
    global _classifier_client
    _classifier_client = client


def set_http_client(client: httpx.AsyncClient | None) -> None:
    """Register the shared HTTP client used by the classifier adapter."""
    global _http_client
    _http_client = client


def reset_messaging_dependencies() -> None:
    """Reset all singletons (for testing)."""
    global _moderation_config, _messaging_config, _time_authority
    global _classifier_client, _http_client
    global _message_repository, _thread_repository
    global _rate_limiter, _circuit_breaker, _gateway, _message_chain
    global _submission_workflow, _mediation_advisor, _verification_service

    _moderation_config = None
    _messaging_config = None
    _time_authority = None
    _classifier_client = None
    _http_client = None
    _message_repository = None
    _thread_repository = None
    _rate_limiter = None
    _circuit_breaker = None
    _gateway = None
    _message_chain = None
    _submission_workflow = None
    _mediation_advisor = None
    _verification_service = None
