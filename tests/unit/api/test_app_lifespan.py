"""Unit tests for the API application lifespan."""

from fastapi.testclient import TestClient

from hearthline.api.dependencies.messaging import (
    get_classifier_client,
    get_http_client,
    set_moderation_config,
)
from hearthline.api.main import app
from hearthline.config.moderation_config import TEST_MODERATION_CONFIG
from hearthline.infrastructure.adapters.anthropic_classifier_client import (
    AnthropicClassifierClient,
)


class TestSharedHttpClient:
    """Tests for the HTTP client opened at startup and closed at shutdown."""

    def test_classifier_adapter_uses_lifespan_client(self) -> None:
        set_moderation_config(TEST_MODERATION_CONFIG)

        with TestClient(app):
            shared = get_http_client()
            classifier = get_classifier_client()

            assert shared is not None
            assert not shared.is_closed
            assert isinstance(classifier, AnthropicClassifierClient)
            assert classifier._http_client is shared

        assert shared.is_closed
        assert get_http_client() is None

    def test_no_shared_client_outside_lifespan(self) -> None:
        assert get_http_client() is None
