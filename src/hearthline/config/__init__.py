"""Configuration module for Hearthline.

Available Configurations:
- ModerationConfig: Classifier access, admission control, fail-open policy
- MessagingConfig: Draft limits and mediation context
"""

from hearthline.config.moderation_config import (
    DEFAULT_MESSAGING_CONFIG,
    DEFAULT_MODERATION_CONFIG,
    MAX_MEDIATION_CONTEXT,
    STRICT_MODERATION_CONFIG,
    TEST_MODERATION_CONFIG,
    MessagingConfig,
    ModerationConfig,
)

__all__ = [
    "DEFAULT_MESSAGING_CONFIG",
    "DEFAULT_MODERATION_CONFIG",
    "MAX_MEDIATION_CONTEXT",
    "STRICT_MODERATION_CONFIG",
    "TEST_MODERATION_CONFIG",
    "MessagingConfig",
    "ModerationConfig",
]
