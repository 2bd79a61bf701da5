"""Application ports (interfaces to external collaborators)."""

from hearthline.application.ports.classifier_client import (
    ClassifierClientProtocol,
    ClassifierRequest,
    ClassifierResponse,
)
from hearthline.application.ports.message_repository import (
    MessageRepositoryProtocol,
    ThreadRepositoryProtocol,
)
from hearthline.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "ClassifierClientProtocol",
    "ClassifierRequest",
    "ClassifierResponse",
    "MessageRepositoryProtocol",
    "ThreadRepositoryProtocol",
    "TimeAuthorityProtocol",
]
