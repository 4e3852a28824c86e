"""Declarative metric definitions: single source of truth for rumkit metrics.

The factory creates OTel instruments from these definitions. The handlers
wire bus events to instruments. No metric is defined anywhere else.

Names follow Prometheus conventions:
    Counter:   "rumkit_foo"          -> exported as "rumkit_foo_total"
    Histogram: "rumkit_bar_seconds"  -> exported as "rumkit_bar_seconds_bucket" etc.
    Gauge:     "rumkit_baz"          -> exported as "rumkit_baz"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MetricType(Enum):
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDef:
    """A single metric definition."""

    name: str
    type: MetricType
    description: str
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] | None = None  # histograms only


METRICS: tuple[MetricDef, ...] = (
    # ── Loading registry ─────────────────────────────────────────────
    MetricDef(
        "rumkit_pending_loads", MetricType.GAUGE,
        "Tracked elements still loading",
    ),
    MetricDef(
        "rumkit_elements_loaded", MetricType.COUNTER,
        "Tracked elements that finished loading",
    ),
    MetricDef(
        "rumkit_element_load_duration_seconds", MetricType.HISTOGRAM,
        "Tracked element load time, start to terminal transition",
        buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    ),
    # ── Discrete events ──────────────────────────────────────────────
    MetricDef(
        "rumkit_actions", MetricType.COUNTER,
        "Actions published", ("type",),
    ),
    MetricDef(
        "rumkit_errors", MetricType.COUNTER,
        "Errors published", ("source",),
    ),
    MetricDef(
        "rumkit_timings", MetricType.COUNTER,
        "Named timings published",
    ),
    MetricDef(
        "rumkit_view_starts", MetricType.COUNTER,
        "Logical view transitions published",
    ),
    MetricDef(
        "rumkit_render_duration_seconds", MetricType.HISTOGRAM,
        "Render sample actual duration",
        buckets=(0.004, 0.008, 0.016, 0.033, 0.05, 0.1, 0.25, 0.5),
    ),
)
