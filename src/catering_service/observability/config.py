"""OpenTelemetry and structured logging setup for the catering service.

Telemetry is exported over OTLP/HTTP. When ``ENVIRONMENT`` is ``test`` the tracer
and meter providers are installed without exporters, so instrumented code runs
unchanged but nothing leaves the process.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.botocore import BotocoreInstrumentor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

UNTRACED_URLS = "/health"
QUIET_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer")


@dataclass(frozen=True)
class TelemetrySettings:
    """Telemetry settings read from the environment."""

    service_name: str
    environment: str
    otlp_endpoint: str
    metric_export_interval_ms: int

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            service_name=os.getenv("OTEL_SERVICE_NAME", "catering-svc"),
            environment=os.getenv("ENVIRONMENT", "development"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318").rstrip("/"),
            metric_export_interval_ms=int(os.getenv("OTEL_METRIC_EXPORT_INTERVAL", "60000")),
        )

    @property
    def exporters_enabled(self) -> bool:
        return self.environment != "test"


def get_service_resource(settings: TelemetrySettings | None = None) -> Resource:
    """Build the resource that identifies this service in every span and metric.

    On Lambda the function name is attached as ``faas.name``.
    """
    settings = settings or TelemetrySettings.from_env()
    attributes: dict[str, str] = {
        "service.name": settings.service_name,
        "deployment.environment": settings.environment,
        "cloud.provider": "aws",
    }

    function_name = os.getenv("AWS_LAMBDA_FUNCTION_NAME")
    if function_name:
        attributes["faas.name"] = function_name

    return Resource.create(attributes)


def setup_tracing(resource: Resource, settings: TelemetrySettings) -> None:
    """Install a tracer provider that batches spans to the OTLP endpoint."""
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{settings.otlp_endpoint}/v1/traces"))
    )
    trace.set_tracer_provider(provider)

    logger.info(f"Tracing exports to {settings.otlp_endpoint}")


def setup_metrics(resource: Resource, settings: TelemetrySettings) -> None:
    """Install a meter provider that periodically pushes to the OTLP endpoint."""
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{settings.otlp_endpoint}/v1/metrics"),
        export_interval_millis=settings.metric_export_interval_ms,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    logger.info(
        f"Metrics export to {settings.otlp_endpoint} "
        f"every {settings.metric_export_interval_ms}ms"
    )


def setup_auto_instrumentation() -> None:
    """Instrument botocore so DynamoDB and S3 calls show up as child spans.

    Safe to call again on a warm Lambda container.
    """
    instrumentor = BotocoreInstrumentor()
    if instrumentor.is_instrumented_by_opentelemetry:
        return

    instrumentor.instrument()
    logger.info("botocore instrumented")


def setup_observability(app: Any = None) -> None:
    """Install tracing and metrics providers and instrument the app.

    Args:
        app: FastAPI application to instrument; ``/health`` is not traced
    """
    settings = TelemetrySettings.from_env()
    resource = get_service_resource(settings)

    if settings.exporters_enabled:
        setup_tracing(resource, settings)
        setup_metrics(resource, settings)
    else:
        trace.set_tracer_provider(TracerProvider(resource=resource))
        metrics.set_meter_provider(MeterProvider(resource=resource))

    setup_auto_instrumentation()

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)

    logger.info(
        f"Observability configured for {settings.service_name} "
        f"(environment={settings.environment}, exporters={settings.exporters_enabled})"
    )


class TraceContextFilter(logging.Filter):
    """Stamp the active trace and span ids onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            record.trace_id = format(span_context.trace_id, "032x")
            record.span_id = format(span_context.span_id, "016x")
        return True


def configure_logging(log_level: str = "INFO") -> None:
    """Route all logging through one JSON handler on the root logger.

    Args:
        log_level: Fallback level when ``LOG_LEVEL`` is not set
    """
    level_name = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "time"},
            timestamp=True,
        )
    )
    handler.addFilter(TraceContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.info(f"JSON logging configured at {level_name}")
