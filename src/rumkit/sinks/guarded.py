"""GuardedSink: the one place where sink failures are caught.

Telemetry must never crash or block the host application. Every core
component writes through a GuardedSink; each call returns a
PublishOutcome instead of raising. Failures are logged with the
traceback and otherwise dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from rumkit.logging import get_logger
from rumkit.sinks.base import ActionType, ErrorSource, RumSink


def _get_logger():
    """Lazy logger -- always reflects the active formatter."""
    return get_logger("rumkit.sink")


@dataclass(frozen=True)
class PublishOutcome:
    """Result of one write to the backend."""

    ok: bool
    operation: str
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


class GuardedSink:
    """Wraps a RumSink; same methods, never raises."""

    def __init__(self, sink: RumSink) -> None:
        self._sink = sink

    @property
    def wrapped(self) -> RumSink:
        return self._sink

    def _call(self, operation: str, fn: Callable[..., Any], *args: Any) -> PublishOutcome:
        try:
            fn(*args)
        except Exception as exc:
            _get_logger().warning(
                "sink.publish_failed",
                operation=operation,
                error=repr(exc),
                exc_info=True,
            )
            return PublishOutcome(False, operation, repr(exc))
        return PublishOutcome(True, operation)

    def set_attributes(self, attributes: Mapping[str, Any]) -> PublishOutcome:
        return self._call("set_attributes", self._sink.set_attributes, attributes)

    def add_action(
        self,
        action_type: ActionType,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> PublishOutcome:
        return self._call(
            "add_action", self._sink.add_action, action_type, name, dict(attributes or {})
        )

    def add_error(
        self,
        message: str,
        source: ErrorSource,
        stack: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> PublishOutcome:
        return self._call(
            "add_error",
            self._sink.add_error,
            message,
            source,
            stack,
            dict(attributes or {}),
        )

    def add_timing(self, name: str) -> PublishOutcome:
        return self._call("add_timing", self._sink.add_timing, name)

    def add_view_loading_time(self, overwrite: bool = True) -> PublishOutcome:
        return self._call("add_view_loading_time", self._sink.add_view_loading_time, overwrite)

    def start_view(
        self, key: str, name: str, attributes: Mapping[str, Any] | None = None
    ) -> PublishOutcome:
        return self._call(
            "start_view", self._sink.start_view, key, name, dict(attributes or {})
        )

    def set_user_info(self, user: Mapping[str, Any]) -> PublishOutcome:
        return self._call("set_user_info", self._sink.set_user_info, user)

    def reset(self) -> PublishOutcome:
        return self._call("reset", self._sink.reset)
