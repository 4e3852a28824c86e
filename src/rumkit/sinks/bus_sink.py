"""Event bus sink: turns each backend write into a typed event.

Lets the configured subscribers (structured logs, JSONL, OTel metrics,
alerts) observe what the session publishes. A no-op until
rumkit.emitter.configure() has been called.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Mapping

from rumkit.emitter import emit
from rumkit.events import (
    ActionAdded,
    AttributesPublished,
    ErrorAdded,
    SinkReset,
    TimingAdded,
    UserInfoSet,
    ViewLoadingTimeAdded,
    ViewStarted,
)
from rumkit.sinks.base import ActionType, ErrorSource


def _now() -> str:
    return datetime.now(UTC).isoformat()


class EventBusSink:
    """Emit one rumkit event per sink call."""

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        pending = attributes.get("pending_loads_count")
        emit(
            AttributesPublished(
                attributes=dict(attributes),
                pending_count=pending if isinstance(pending, int) else None,
                timestamp=_now(),
            )
        )

    def add_action(
        self, action_type: ActionType, name: str, attributes: Mapping[str, Any]
    ) -> None:
        emit(ActionAdded(ActionType(action_type).value, name, dict(attributes), _now()))

    def add_error(
        self,
        message: str,
        source: ErrorSource,
        stack: str,
        attributes: Mapping[str, Any],
    ) -> None:
        emit(ErrorAdded(message, ErrorSource(source).value, stack, dict(attributes), _now()))

    def add_timing(self, name: str) -> None:
        emit(TimingAdded(name, _now()))

    def add_view_loading_time(self, overwrite: bool) -> None:
        emit(ViewLoadingTimeAdded(overwrite, _now()))

    def start_view(self, key: str, name: str, attributes: Mapping[str, Any]) -> None:
        emit(
            ViewStarted(
                key=key,
                name=name,
                previous_view=attributes.get("previous_view"),
                attributes=dict(attributes),
                timestamp=_now(),
            )
        )

    def set_user_info(self, user: Mapping[str, Any]) -> None:
        user_id = user.get("id")
        emit(
            UserInfoSet(
                user_id=str(user_id) if user_id is not None else None,
                has_email=bool(user.get("email")),
                timestamp=_now(),
            )
        )

    def reset(self) -> None:
        emit(SinkReset(_now()))
