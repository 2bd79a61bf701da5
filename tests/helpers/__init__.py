"""Test helpers for Hearthline tests.

This package contains reusable test utilities and fake implementations
for dependency injection in unit tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    make_message / make_chain: Hash-linked message builders
    metric_value: Read one sample from a Prometheus registry
    build_gateway: ModerationGateway on a fake clock

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.message_factory import make_chain, make_message
from tests.helpers.metrics import metric_value
from tests.helpers.moderation import build_gateway

__all__ = [
    "FakeTimeAuthority",
    "build_gateway",
    "make_chain",
    "make_message",
    "metric_value",
]
