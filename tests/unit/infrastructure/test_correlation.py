"""Unit tests for correlation ID management.

Tests the correlation ID context management and structlog processor.
"""

import asyncio
import re

from hearthline.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestGenerateCorrelationId:
    """Tests for generate_correlation_id function."""

    def test_generate_returns_uuid4(self) -> None:
        uuid_pattern = re.compile(
            r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
        )
        assert uuid_pattern.match(generate_correlation_id()) is not None

    def test_generate_returns_unique_ids(self) -> None:
        assert len({generate_correlation_id() for _ in range(50)}) == 50


class TestCorrelationIdContext:
    """Tests for correlation ID context management."""

    async def test_context_isolation_between_tasks(self) -> None:
        """Each submission task keeps its own correlation ID across the classifier await."""
        results: dict[str, str] = {}

        async def task_with_id(task_name: str, correlation_id: str) -> None:
            set_correlation_id(correlation_id)
            await asyncio.sleep(0.01)
            results[task_name] = get_correlation_id()

        await asyncio.gather(
            task_with_id("send-1", "id-1"),
            task_with_id("send-2", "id-2"),
        )

        assert results == {"send-1": "id-1", "send-2": "id-2"}


class TestCorrelationIdProcessor:
    """Tests for the structlog correlation ID processor."""

    def test_processor_adds_correlation_id_when_set(self) -> None:
        set_correlation_id("processor-test-id")

        result = correlation_id_processor(None, "info", {"event": "message_appended"})

        assert result["correlation_id"] == "processor-test-id"
        set_correlation_id("")

    def test_processor_skips_when_unset(self) -> None:
        set_correlation_id("")

        result = correlation_id_processor(None, "info", {"event": "message_appended"})

        assert "correlation_id" not in result

    def test_processor_keeps_explicit_value(self) -> None:
        set_correlation_id("from-context")

        result = correlation_id_processor(
            None, "info", {"event": "request_started", "correlation_id": "bound"}
        )

        assert result["correlation_id"] == "bound"
        set_correlation_id("")
