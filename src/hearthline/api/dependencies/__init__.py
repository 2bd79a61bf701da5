"""API dependencies for dependency injection."""

from hearthline.api.dependencies.messaging import (
    get_chain_verification_service,
    get_circuit_breaker,
    get_current_user_id,
    get_http_client,
    get_mediation_advisor,
    get_message_repository,
    get_messaging_config,
    get_moderation_config,
    get_submission_workflow,
    get_thread_repository,
    reset_messaging_dependencies,
    set_classifier_client,
    set_http_client,
    set_moderation_config,
    set_time_authority,
)

__all__: list[str] = [
    "get_chain_verification_service",
    "get_circuit_breaker",
    "get_current_user_id",
    "get_http_client",
    "get_mediation_advisor",
    "get_message_repository",
    "get_messaging_config",
    "get_moderation_config",
    "get_submission_workflow",
    "get_thread_repository",
    "reset_messaging_dependencies",
    "set_classifier_client",
    "set_http_client",
    "set_moderation_config",
    "set_time_authority",
]
