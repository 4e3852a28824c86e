"""Create OTel instruments from the declarative metric schema."""

from __future__ import annotations

from typing import Any

from rumkit.metrics_schema import METRICS, MetricType


def create_instruments(meter: Any) -> dict[str, Any]:
    """Create OTel instruments from METRICS.

    Returns {metric_name: instrument}. Instruments have .add() (counter),
    .record() (histogram), or .set() (gauge) methods.
    """
    instruments: dict[str, Any] = {}

    for m in METRICS:
        if m.type == MetricType.COUNTER:
            instruments[m.name] = meter.create_counter(m.name, description=m.description)
        elif m.type == MetricType.HISTOGRAM:
            instruments[m.name] = meter.create_histogram(m.name, description=m.description)
        elif m.type == MetricType.GAUGE:
            instruments[m.name] = meter.create_gauge(m.name, description=m.description)

    return instruments


def create_views() -> list[Any]:
    """OTel Views for histograms with custom bucket boundaries."""
    from opentelemetry.sdk.metrics.view import (
        ExplicitBucketHistogramAggregation,
        View,
    )

    return [
        View(
            instrument_name=m.name,
            aggregation=ExplicitBucketHistogramAggregation(boundaries=list(m.buckets)),
        )
        for m in METRICS
        if m.type == MetricType.HISTOGRAM and m.buckets
    ]
