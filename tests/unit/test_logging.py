"""Tests for logging configuration."""

from __future__ import annotations

from unittest.mock import MagicMock

import structlog

from duckdb_s3_source.core.logging import (
    MASK,
    add_service_context,
    configure_logging,
    get_logger,
    mask_sensitive_fields,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_production(self) -> None:
        """Production mode should use JSON renderer."""
        settings = MagicMock()
        settings.ENVIRONMENT = "production"
        settings.LOG_LEVEL = "INFO"
        settings.APP_NAME = "duckdb-s3-source"

        configure_logging(settings)

        logger = get_logger("test")
        assert logger is not None

    def test_configure_logging_development(self) -> None:
        """Development mode should use console renderer."""
        settings = MagicMock()
        settings.ENVIRONMENT = "development"
        settings.LOG_LEVEL = "DEBUG"
        settings.APP_NAME = "duckdb-s3-source"

        configure_logging(settings)

        logger = get_logger("test.dev")
        assert logger is not None


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_bound_logger(self) -> None:
        """Should return a structlog BoundLogger."""
        logger = get_logger("test.module")
        assert hasattr(logger, "info")
        assert hasattr(logger, "debug")
        assert hasattr(logger, "warning")


class TestMaskSensitiveFields:
    """Tests for mask_sensitive_fields processor."""

    def test_masks_credential_keys(self) -> None:
        event_dict = {
            "event": "session opened",
            "secret_access_key": "s3cr3t",
            "Secret": "other",
            "region": "us-east-1",
        }
        result = mask_sensitive_fields(None, "info", event_dict)

        assert result["secret_access_key"] == MASK
        assert result["Secret"] == MASK
        assert result["region"] == "us-east-1"
        assert result["event"] == "session opened"

    def test_leaves_plain_events_alone(self) -> None:
        event_dict = {"event": "test", "dataset": "orders"}
        assert mask_sensitive_fields(None, "info", dict(event_dict)) == event_dict


class TestAddServiceContext:
    """Tests for add_service_context processor."""

    def test_adds_default_service_name(self) -> None:
        """Should add default service name if not present."""
        result = add_service_context(None, "info", {"event": "test"})
        assert result["service"] == "duckdb-s3-source"

    def test_preserves_existing_service(self) -> None:
        """Should not overwrite existing service name."""
        result = add_service_context(None, "info", {"event": "test", "service": "custom"})
        assert result["service"] == "custom"

    def test_uses_given_service_name(self) -> None:
        result = add_service_context(None, "info", {"event": "test"}, service="orders-loader")
        assert result["service"] == "orders-loader"

    def test_configured_from_app_name(self) -> None:
        """configure_logging should tag entries with settings.APP_NAME."""
        settings = MagicMock()
        settings.ENVIRONMENT = "production"
        settings.LOG_LEVEL = "INFO"
        settings.APP_NAME = "orders-loader"

        configure_logging(settings)

        processors = structlog.get_config()["processors"]
        service_processors = [
            p for p in processors if getattr(p, "func", None) is add_service_context
        ]
        assert len(service_processors) == 1
        result = service_processors[0](None, "info", {"event": "test"})
        assert result["service"] == "orders-loader"
