"""Process-wide event bus for rumkit.

EventBusSink calls emit() for every backend write. Until configure()
runs there is no emitter and emit() returns immediately, so a session
used without the bus (tests, unsampled processes) pays nothing.

configure() wires, in order:
    1. logging (formatter x destination)
    2. the pyventus emitter on RumEventLinker
    3. subscribers: structured log lines, JSONL file, OTel metrics, alerts
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pyventus.events import EventEmitter

if TYPE_CHECKING:
    from rumkit.config import LoggingConfig

_emitter: EventEmitter | None = None
_meter_provider: Any = None

_OTEL_HINT = "pip install rumkit[otel]"


def emit(event: Any) -> None:
    """Hand `event` to the bus; silently dropped before configure()."""
    if _emitter is None:
        return
    _emitter.emit(event)


def _metric_readers(cfg: LoggingConfig, log: Any) -> list[Any]:
    """OTLP push and/or Prometheus pull readers, whichever are enabled and importable."""
    readers: list[Any] = []

    if cfg.otel_enabled:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
                OTLPMetricExporter,
            )
            from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
        except ImportError:
            log.warning("metrics.otlp_unavailable", hint=_OTEL_HINT)
        else:
            exporter = OTLPMetricExporter(endpoint=cfg.otel_endpoint)
            readers.append(PeriodicExportingMetricReader(exporter))

    if cfg.prometheus_enabled:
        try:
            from opentelemetry.exporter.prometheus import PrometheusMetricReader
            from prometheus_client import start_http_server
        except ImportError:
            log.warning("metrics.prometheus_unavailable", hint=_OTEL_HINT)
        else:
            readers.append(PrometheusMetricReader())
            start_http_server(cfg.prometheus_port)
            log.info("metrics.prometheus_listening", port=cfg.prometheus_port)

    return readers


def _start_metrics(cfg: LoggingConfig) -> Any:
    """MeterProvider with bucket views, instruments from the schema, bus handlers."""
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.resources import Resource

    from rumkit.logging import get_logger
    from rumkit.metrics_factory import create_instruments, create_views
    from rumkit.subscribers.metrics_handlers import register_metric_handlers

    log = get_logger("rumkit.metrics")
    readers = _metric_readers(cfg, log)
    if not readers:
        log.warning("metrics.no_readers", hint="instruments record but nothing exports")

    provider = MeterProvider(
        resource=Resource.create({"service.name": cfg.otel_service_name}),
        metric_readers=readers,
        views=create_views(),
    )
    instruments = create_instruments(provider.get_meter("rumkit"))
    register_metric_handlers(instruments)
    log.info("metrics.started", readers=len(readers), instruments=len(instruments))
    return provider


def _register_subscribers(cfg: LoggingConfig) -> None:
    global _meter_provider

    from rumkit.logging import get_logger
    from rumkit.subscribers.alert import register_alert_subscriber
    from rumkit.subscribers.structlog_sub import register_structlog_subscriber

    register_structlog_subscriber()

    if cfg.jsonl_path:
        from rumkit.subscribers.jsonl import register_jsonl_subscriber

        register_jsonl_subscriber(cfg.jsonl_path)

    if cfg.otel_enabled or cfg.prometheus_enabled:
        try:
            _meter_provider = _start_metrics(cfg)
        except ImportError:
            get_logger("rumkit.metrics").warning("metrics.sdk_unavailable", hint=_OTEL_HINT)
        except Exception:
            # e.g. the Prometheus port is already bound
            get_logger("rumkit.metrics").error("metrics.setup_failed", exc_info=True)

    register_alert_subscriber(cfg)


def configure(config: LoggingConfig | None = None) -> EventEmitter:
    """Set up logging, the bus and its subscribers. Later calls return the same emitter."""
    global _emitter

    if _emitter is not None:
        return _emitter

    from pyventus.core.processing.asyncio import AsyncIOProcessingService

    from rumkit.config import LoggingConfig
    from rumkit.linker import RumEventLinker
    from rumkit.logging import setup_logging

    cfg = config or LoggingConfig()
    setup_logging(cfg)

    _emitter = EventEmitter(
        event_linker=RumEventLinker,
        event_processor=AsyncIOProcessingService(),
    )
    _register_subscribers(cfg)
    return _emitter


def is_configured() -> bool:
    return _emitter is not None


def reset() -> None:
    """Undo configure(): subscribers, meter provider, logging handler."""
    global _emitter, _meter_provider

    from rumkit.linker import RumEventLinker
    from rumkit.logging import shutdown_logging

    RumEventLinker.remove_all()
    if _meter_provider is not None:
        _meter_provider.shutdown()
    shutdown_logging()

    _emitter = None
    _meter_provider = None
