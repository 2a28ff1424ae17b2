"""
Logging and tracing bootstrap for the schedule service.

`setup_telemetry` reads `TelemetryConfig` from the environment, installs a JSON
log handler that stamps every record with the service name, the current request
id and (when tracing is on) the active span, and optionally exports OpenTelemetry
spans for the FastAPI app. `install_request_context` binds one request id per
HTTP request so log lines and error bodies can be correlated.
"""

from __future__ import annotations

import logging
import os
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Mapping
from uuid import uuid4

from fastapi import FastAPI, Request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import SpanContext
from pythonjsonlogger import jsonlogger

CORRELATION_ID_HEADER = "x-request-id"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4318/v1/traces"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s %(request_id)s %(trace_id)s %(span_id)s"
RENAMED_LOG_FIELDS = {"asctime": "timestamp", "levelname": "level", "name": "logger"}

RequestContextToken = Token

_TRUTHY = {"1", "true", "yes", "on"}
_logging_configured = False
_request_id: ContextVar[str | None] = ContextVar("schedule_request_id", default=None)


@dataclass(frozen=True, slots=True)
class TelemetryConfig:
    service_name: str
    log_level: int = logging.INFO
    traces_enabled: bool = False
    console_export: bool = False
    otlp_endpoint: str = DEFAULT_OTLP_ENDPOINT

    @classmethod
    def from_env(cls, service_name: str, environ: Mapping[str, str] | None = None) -> "TelemetryConfig":
        env = os.environ if environ is None else environ
        level = logging.getLevelName(env.get("LOG_LEVEL", "INFO").strip().upper())
        return cls(
            service_name=env.get("OTEL_SERVICE_NAME") or service_name,
            log_level=level if isinstance(level, int) else logging.INFO,
            traces_enabled=env.get("ENABLE_TELEMETRY", "").strip().lower() in _TRUTHY,
            console_export=env.get("OTEL_CONSOLE_EXPORT", "").strip().lower() in _TRUTHY,
            otlp_endpoint=env.get("OTEL_EXPORTER_OTLP_ENDPOINT") or DEFAULT_OTLP_ENDPOINT,
        )


def setup_telemetry(app: FastAPI, service_name: str, config: TelemetryConfig | None = None) -> TelemetryConfig:
    """
    Configure JSON logging and, when enabled, tracing for the FastAPI app.

    Args:
        app: FastAPI app instance that should emit spans/logs.
        service_name: Fallback service label when OTEL_SERVICE_NAME is unset.
        config: Explicit settings; read from the environment when omitted.
    Returns:
        The settings that were applied.
    """

    config = config or TelemetryConfig.from_env(service_name)
    _configure_logging(config)

    if config.traces_enabled:
        _configure_tracing(config)
        FastAPIInstrumentor.instrument_app(app)
        LoggingInstrumentor().instrument(set_logging_format=False)
    return config


def install_request_context(app: FastAPI, header_name: str = CORRELATION_ID_HEADER) -> None:
    """Bind a request id for every HTTP request and echo it on the response."""

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = ensure_request_id(request, header_name)
        token = bind_request_context(request_id)
        try:
            response = await call_next(request)
            response.headers.setdefault(header_name, request_id)
            return response
        finally:
            reset_request_context(token)


def ensure_request_id(request: Request | None, header_name: str = CORRELATION_ID_HEADER) -> str:
    """Reuse the inbound request id header or mint a new UUID4 value."""

    if request is not None:
        existing = request.headers.get(header_name) or getattr(request.state, "request_id", None)
        if existing:
            request.state.request_id = existing
            return existing

    request_id = str(uuid4())
    if request is not None:
        request.state.request_id = request_id
    return request_id


def bind_request_context(request_id: str | None) -> RequestContextToken:
    return _request_id.set(request_id)


def reset_request_context(token: RequestContextToken | None) -> None:
    if token is not None:
        _request_id.reset(token)


def current_request_id() -> str | None:
    return _request_id.get()


def _configure_logging(config: TelemetryConfig) -> None:
    global _logging_configured
    if _logging_configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT, rename_fields=RENAMED_LOG_FIELDS))
    handler.addFilter(_ScheduleContextFilter(config.service_name, config.traces_enabled))

    logging.basicConfig(level=config.log_level, handlers=[handler], force=True)
    _logging_configured = True


def _configure_tracing(config: TelemetryConfig) -> None:
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: config.service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otlp_endpoint)))
    if config.console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)


def _active_span_ids() -> tuple[str | None, str | None]:
    span_context = trace.get_current_span().get_span_context()
    if not isinstance(span_context, SpanContext) or not span_context.is_valid:
        return None, None
    return format(span_context.trace_id, "032x"), format(span_context.span_id, "016x")


class _ScheduleContextFilter(logging.Filter):
    """Stamp service, request and span identifiers onto every record."""

    def __init__(self, service_name: str, traces_enabled: bool) -> None:
        super().__init__()
        self._service_name = service_name
        self._traces_enabled = traces_enabled

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self._service_name
        record.request_id = current_request_id()
        record.trace_id, record.span_id = _active_span_ids() if self._traces_enabled else (None, None)
        return True
