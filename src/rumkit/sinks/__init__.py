"""Sinks: strategy pattern for the telemetry backend boundary."""

from rumkit.sinks.base import ActionType, ErrorSource, RumSink
from rumkit.sinks.bus_sink import EventBusSink
from rumkit.sinks.guarded import GuardedSink, PublishOutcome
from rumkit.sinks.memory_sink import RecordingSink
from rumkit.sinks.noop_sink import NoOpSink

__all__ = [
    "ActionType",
    "ErrorSource",
    "RumSink",
    "EventBusSink",
    "GuardedSink",
    "PublishOutcome",
    "RecordingSink",
    "NoOpSink",
]
