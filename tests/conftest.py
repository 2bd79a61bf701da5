"""
Pytest configuration and shared fixtures for Hearthline tests.

Testing Standards:
- All async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Time-dependent tests use FakeTimeAuthority, never the wall clock
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from collections.abc import Iterator

import pytest
import structlog

from tests.helpers import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from hearthline import __version__

    return __version__


@pytest.fixture(autouse=True)
def isolated_observability() -> Iterator[None]:
    """Give every test a fresh metrics registry and default structlog config."""
    from hearthline.api.dependencies.messaging import reset_messaging_dependencies
    from hearthline.infrastructure.monitoring.metrics import reset_metrics_collector

    structlog.reset_defaults()
    reset_metrics_collector()
    reset_messaging_dependencies()
    yield
    reset_messaging_dependencies()
    reset_metrics_collector()
    structlog.reset_defaults()


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Time authority frozen at 2026-01-01T00:00:00Z with monotonic at 0."""
    return FakeTimeAuthority()
