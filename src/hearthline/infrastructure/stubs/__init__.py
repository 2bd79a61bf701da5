"""In-memory stub implementations of application ports (development and tests)."""

from hearthline.infrastructure.stubs.classifier_client_stub import (
    NOT_HOSTILE_RESPONSE,
    ClassifierClientStub,
)
from hearthline.infrastructure.stubs.message_repository_stub import (
    MessageRepositoryStub,
    ThreadRepositoryStub,
)

__all__: list[str] = [
    "NOT_HOSTILE_RESPONSE",
    "ClassifierClientStub",
    "MessageRepositoryStub",
    "ThreadRepositoryStub",
]
