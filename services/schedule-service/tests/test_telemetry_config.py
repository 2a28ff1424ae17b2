import logging

from shared.observability import (
    TelemetryConfig,
    bind_request_context,
    current_request_id,
    reset_request_context,
)
from shared.observability.telemetry import DEFAULT_OTLP_ENDPOINT


def test_defaults_when_environment_is_empty():
    config = TelemetryConfig.from_env("schedule-service", environ={})

    assert config == TelemetryConfig(service_name="schedule-service")
    assert config.otlp_endpoint == DEFAULT_OTLP_ENDPOINT


def test_reads_tracing_and_log_level_from_environment():
    config = TelemetryConfig.from_env(
        "schedule-service",
        environ={
            "OTEL_SERVICE_NAME": "schedules-eu",
            "LOG_LEVEL": "debug",
            "ENABLE_TELEMETRY": "yes",
            "OTEL_CONSOLE_EXPORT": "1",
            "OTEL_EXPORTER_OTLP_ENDPOINT": "http://collector:4318/v1/traces",
        },
    )

    assert config.service_name == "schedules-eu"
    assert config.log_level == logging.DEBUG
    assert config.traces_enabled is True
    assert config.console_export is True
    assert config.otlp_endpoint == "http://collector:4318/v1/traces"


def test_unknown_log_level_falls_back_to_info():
    config = TelemetryConfig.from_env("schedule-service", environ={"LOG_LEVEL": "chatty"})
    assert config.log_level == logging.INFO


def test_request_context_binds_and_resets():
    assert current_request_id() is None

    token = bind_request_context("req-1")
    assert current_request_id() == "req-1"

    reset_request_context(token)
    assert current_request_id() is None
