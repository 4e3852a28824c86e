"""Alert subscriber: runs every alertable bus event through the rules.

Reports through LogAlertSink when RUMKIT_ALERTS_ENABLED is on and through
NoOpAlertSink otherwise, unless a sink is passed in.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from rumkit.alerts.base import AlertSink
from rumkit.alerts.rules import build_rules
from rumkit.alerts.sinks import LogAlertSink, NoOpAlertSink
from rumkit.config import LoggingConfig
from rumkit.events import ActionAdded, AttributesPublished, ErrorAdded
from rumkit.linker import RumEventLinker

ALERTABLE_EVENTS = (AttributesPublished, ErrorAdded, ActionAdded)


def register_alert_subscriber(config: LoggingConfig, sink: AlertSink | None = None) -> None:
    if sink is None:
        sink = LogAlertSink() if config.alert_enabled else NoOpAlertSink()
    rules = build_rules(config.pending_alert_threshold)

    @RumEventLinker.on(*ALERTABLE_EVENTS)
    def _evaluate(event: Any) -> None:
        now = datetime.now(UTC)
        for rule in rules:
            if rule.should_fire(event, now):
                sink.fire(rule, event)
