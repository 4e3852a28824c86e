"""No-op sink: default when no backend is configured, and for unsampled sessions."""

from __future__ import annotations

from typing import Any, Mapping

from rumkit.sinks.base import ActionType, ErrorSource


class NoOpSink:
    """Discards all writes. Zero overhead."""

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        pass

    def add_action(
        self, action_type: ActionType, name: str, attributes: Mapping[str, Any]
    ) -> None:
        pass

    def add_error(
        self,
        message: str,
        source: ErrorSource,
        stack: str,
        attributes: Mapping[str, Any],
    ) -> None:
        pass

    def add_timing(self, name: str) -> None:
        pass

    def add_view_loading_time(self, overwrite: bool) -> None:
        pass

    def start_view(self, key: str, name: str, attributes: Mapping[str, Any]) -> None:
        pass

    def set_user_info(self, user: Mapping[str, Any]) -> None:
        pass

    def reset(self) -> None:
        pass
