"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed (required for asyncio.TaskGroup)
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        """Python 3.11+ is required for asyncio.TaskGroup support."""
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required for asyncio.TaskGroup, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreFramework:
    """Verify core framework dependencies."""

    def test_fastapi_import(self) -> None:
        """FastAPI must be importable."""
        from fastapi import FastAPI

        app = FastAPI()
        assert app is not None

    def test_pydantic_v2(self) -> None:
        """Pydantic v2 must be installed (required for FastAPI integration)."""
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"


class TestClassifierTransport:
    """Verify async HTTP client for the remote classifier."""

    def test_httpx_async_import(self) -> None:
        """httpx async client and mock transport must be importable."""
        from httpx import AsyncClient, MockTransport

        assert AsyncClient is not None
        assert MockTransport is not None


class TestObservability:
    """Verify structured logging and metrics."""

    def test_structlog_configuration(self) -> None:
        """structlog can be bound with context."""
        import structlog

        logger = structlog.get_logger()
        bound_logger = logger.bind(service="ModerationGateway", operation="test")
        assert bound_logger is not None

    def test_prometheus_client_import(self) -> None:
        """prometheus_client registry must be importable."""
        from prometheus_client import CollectorRegistry

        assert CollectorRegistry() is not None


class TestProjectVersion:
    """Verify project metadata is accessible."""

    def test_version_format(self, project_version: str) -> None:
        """Version must be in semver format."""
        parts = project_version.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {project_version}"
