"""
OpenTelemetry tracing for the reservation service.

The tracer provider is installed from Settings at startup. FastAPI requests and SQLAlchemy
statements are auto-instrumented; use cases and repositories open their own spans with
`trace.get_tracer(__name__)`, so a reserve call shows up as
request -> use_case.reserve_seats -> db.show_seat.get_for_update -> SQL.
"""

from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig.from_settings(settings)
        tracing.setup()
        tracing.instrument_sqlalchemy(engine=database.engine)
        ...
        tracing.shutdown()
    """

    def __init__(
        self,
        *,
        service_name: str,
        service_version: str = '',
        otlp_endpoint: Optional[str] = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.otlp_endpoint = otlp_endpoint
        self.enable_console = enable_console

        self._provider: Optional[TracerProvider] = None
        self._sqlalchemy_instrumentor: Optional[SQLAlchemyInstrumentor] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> 'TracingConfig':
        return cls(
            service_name=settings.SERVICE_NAME,
            service_version=settings.VERSION,
            otlp_endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            enable_console=settings.OTEL_CONSOLE_EXPORT,
        )

    def setup(self) -> None:
        """
        Without an exporter spans are still created, and span ids still land in the
        trace context, they are just not shipped anywhere.
        """
        resource = Resource(
            attributes={SERVICE_NAME: self.service_name, SERVICE_VERSION: self.service_version}
        )
        # Tail-based sampling belongs in the collector; keep every span here
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        exporters = []
        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )
            exporters.append(f'otlp({self.otlp_endpoint})')
        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            exporters.append('console')

        trace.set_tracer_provider(self._provider)
        Logger.base.info(
            f'[TRACING] {self.service_name} exporting to {", ".join(exporters) or "nowhere"}'
        )

    @staticmethod
    def instrument_fastapi(*, app: Any, excluded_urls: str = 'health') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine wraps a sync engine; the instrumentor hooks the sync one
        sync_engine = getattr(engine, 'sync_engine', engine)
        self._sqlalchemy_instrumentor = SQLAlchemyInstrumentor()
        self._sqlalchemy_instrumentor.instrument(engine=sync_engine)

    def shutdown(self) -> None:
        if self._sqlalchemy_instrumentor is not None:
            self._sqlalchemy_instrumentor.uninstrument()
            self._sqlalchemy_instrumentor = None
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None
