"""
Test suite for request middleware.

System role: Verification of correlation id propagation and request logging
"""

import logging

import pytest
from fastapi.testclient import TestClient

from kb_assistant.api.deps import ServiceContainer
from kb_assistant.api.main import create_app
from kb_assistant.configs import Settings
from kb_assistant.observability.correlation import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationMiddleware:
    """Test suite for X-Correlation-ID handling."""

    def test_should_echo_supplied_correlation_id(self, client: TestClient) -> None:
        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_should_generate_correlation_id_when_missing(self, client: TestClient) -> None:
        first = client.get("/api/v1/health").headers["X-Correlation-ID"]
        second = client.get("/api/v1/health").headers["X-Correlation-ID"]

        assert first
        assert first != second


class TestCorrelationIdFilter:
    """Test suite for log record enrichment."""

    def test_should_attach_current_correlation_id(self) -> None:
        # Arrange
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)
        set_correlation_id("req-42")

        # Act
        try:
            CorrelationIdFilter().filter(record)
        finally:
            clear_correlation_id()

        # Assert
        assert record.correlation_id == "req-42"
        assert get_correlation_id() == ""

    def test_should_use_dash_outside_requests(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"


MIDDLEWARE_LOGGER = "kb_assistant.observability.middleware"


def completion_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [
        record
        for record in caplog.records
        if record.name == MIDDLEWARE_LOGGER and hasattr(record, "status_code")
    ]


class TestRequestLoggingMiddleware:
    """Test suite for per-request log lines."""

    def test_should_log_route_operation_and_correlation_id(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Arrange
        caplog.set_level(logging.INFO, logger=MIDDLEWARE_LOGGER)

        # Act
        client.get("/api/v1/health", headers={"X-Correlation-ID": "trace-7"})

        # Assert
        record = completion_records(caplog)[-1]
        assert record.operation == "health_check"
        assert record.correlation_id == "trace-7"
        assert record.status_code == 200
        assert record.levelno == logging.INFO
        assert "[health_check]" in record.getMessage()

    def test_unmatched_path_should_log_without_operation(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger=MIDDLEWARE_LOGGER)

        client.get("/api/v1/does-not-exist")

        record = completion_records(caplog)[-1]
        assert record.operation is None
        assert record.status_code == 404

    def test_slow_request_should_log_warning(
        self,
        embeddings,
        vector_index,
        mock_chat_model,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        # Arrange
        services = ServiceContainer(
            settings=Settings(slow_request_ms=0.000001),
            embeddings=embeddings,
            vector_index=vector_index,
            chat_model=mock_chat_model,
        )
        client = TestClient(create_app(services))
        caplog.set_level(logging.INFO, logger=MIDDLEWARE_LOGGER)

        # Act
        client.get("/api/v1/health")

        # Assert
        record = completion_records(caplog)[-1]
        assert record.operation == "health_check"
        assert record.levelno == logging.WARNING
        assert record.getMessage().endswith("(slow)")


class TestServiceSettings:
    """Test suite for service-wide settings applied by create_app."""

    def test_api_prefix_should_be_normalized_and_applied(
        self, embeddings, vector_index, mock_chat_model
    ) -> None:
        # Arrange
        settings = Settings(api_prefix="kb/v2/")
        services = ServiceContainer(
            settings=settings,
            embeddings=embeddings,
            vector_index=vector_index,
            chat_model=mock_chat_model,
        )
        client = TestClient(create_app(services))

        # Act
        moved = client.get("/kb/v2/health")
        old = client.get("/api/v1/health")

        # Assert
        assert settings.api_prefix == "/kb/v2"
        assert moved.status_code == 200
        assert old.status_code == 404

    def test_log_level_should_be_upper_cased(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_should_be_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(log_level="verbose")

    def test_cors_should_only_allow_configured_origins(
        self, embeddings, vector_index, mock_chat_model
    ) -> None:
        services = ServiceContainer(
            settings=Settings(cors_allow_origins=["https://kb.example"]),
            embeddings=embeddings,
            vector_index=vector_index,
            chat_model=mock_chat_model,
        )
        client = TestClient(create_app(services))

        allowed = client.get("/api/v1/health", headers={"Origin": "https://kb.example"})
        other = client.get("/api/v1/health", headers={"Origin": "https://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == "https://kb.example"
        assert "access-control-allow-origin" not in other.headers
