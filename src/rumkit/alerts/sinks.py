"""Where fired alerts go.

LogAlertSink is used when RUMKIT_ALERTS_ENABLED is on, NoOpAlertSink
otherwise. Custom sinks only need a fire(rule, event) method.
"""

from __future__ import annotations

from typing import Any

from rumkit.alerts.base import AlertRule
from rumkit.logging import get_logger


class LogAlertSink:
    """Warn through the rumkit.alerts logger. Event payloads are summarized."""

    def fire(self, rule: AlertRule, event: Any) -> None:
        get_logger("rumkit.alerts").warning(
            "alert.fired",
            rule=rule.name,
            severity=rule.severity,
            description=rule.description,
            event_type=type(event).__name__,
            event_name=getattr(event, "name", None),
        )


class NoOpAlertSink:
    """Alerting disabled: rules still evaluate, nothing is reported."""

    def fire(self, rule: AlertRule, event: Any) -> None:
        return None
