"""Alert rules and the AlertSink protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Literal, Protocol, runtime_checkable

Severity = Literal["info", "warning", "critical"]


@dataclass
class AlertRule:
    """Fires when `condition(event)` holds, at most once per `cooldown`.

    Rules are stateful (last firing time), so each subscriber builds its
    own instances with build_rules().
    """

    name: str
    description: str
    severity: Severity
    condition: Callable[[Any], bool]
    cooldown: timedelta = timedelta(minutes=5)
    last_fired: datetime | None = field(default=None, repr=False)

    def matches(self, event: Any) -> bool:
        """condition(event), with a raising condition counted as no match."""
        try:
            return bool(self.condition(event))
        except Exception:
            return False

    def cooling_down(self, now: datetime) -> bool:
        return self.last_fired is not None and now - self.last_fired < self.cooldown

    def should_fire(self, event: Any, now: datetime) -> bool:
        """Match and not cooling down; records `now` as the firing time when true."""
        if not self.matches(event) or self.cooling_down(now):
            return False
        self.last_fired = now
        return True


@runtime_checkable
class AlertSink(Protocol):
    def fire(self, rule: AlertRule, event: Any) -> None: ...
