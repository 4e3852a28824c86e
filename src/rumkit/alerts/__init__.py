"""Alert system: condition evaluation on events."""

from rumkit.alerts.base import AlertRule, AlertSink
from rumkit.alerts.rules import build_rules
from rumkit.alerts.sinks import LogAlertSink, NoOpAlertSink

__all__ = ["AlertRule", "AlertSink", "LogAlertSink", "NoOpAlertSink", "build_rules"]
