"""RumSink protocol: the boundary to the telemetry backend.

A sink is write-only. Nothing in rumkit reads state back from it.
Implementations may raise; core code only ever talks to a sink through
rumkit.sinks.guarded.GuardedSink, which turns failures into logged
outcomes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Protocol, runtime_checkable


class ActionType(str, Enum):
    """Backend action types."""

    TAP = "tap"
    SCROLL = "scroll"
    SWIPE = "swipe"
    BACK = "back"
    CUSTOM = "custom"

    @classmethod
    def from_kind(cls, kind: str | ActionType | None) -> ActionType:
        """Map an interaction kind to an action type; unknown kinds are custom."""
        if isinstance(kind, ActionType):
            return kind
        try:
            return cls(str(kind).lower())
        except ValueError:
            return cls.CUSTOM


class ErrorSource(str, Enum):
    """Where an error was observed."""

    SOURCE = "source"
    NETWORK = "network"
    WEBVIEW = "webview"
    CONSOLE = "console"
    CUSTOM = "custom"


@runtime_checkable
class RumSink(Protocol):
    """Structured writes accepted by the telemetry backend."""

    def set_attributes(self, attributes: Mapping[str, Any]) -> None: ...

    def add_action(
        self, action_type: ActionType, name: str, attributes: Mapping[str, Any]
    ) -> None: ...

    def add_error(
        self,
        message: str,
        source: ErrorSource,
        stack: str,
        attributes: Mapping[str, Any],
    ) -> None: ...

    def add_timing(self, name: str) -> None: ...

    def add_view_loading_time(self, overwrite: bool) -> None: ...

    def start_view(self, key: str, name: str, attributes: Mapping[str, Any]) -> None: ...

    def set_user_info(self, user: Mapping[str, Any]) -> None: ...

    def reset(self) -> None: ...
