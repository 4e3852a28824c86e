"""In-memory sink: records every write. Used in tests and local dev."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping

from rumkit.sinks.base import ActionType, ErrorSource


@dataclass(frozen=True)
class RecordedAction:
    action_type: ActionType
    name: str
    attributes: dict[str, Any]


@dataclass(frozen=True)
class RecordedError:
    message: str
    source: ErrorSource
    stack: str
    attributes: dict[str, Any]


@dataclass(frozen=True)
class RecordedView:
    key: str
    name: str
    attributes: dict[str, Any]


@dataclass
class RecordingSink:
    """Keeps the merged global attributes plus an ordered log of each call kind.

    `attribute_writes` holds every set_attributes payload in call order,
    so tests can check that a snapshot was published after each mutation.
    """

    attributes: dict[str, Any] = field(default_factory=dict)
    attribute_writes: list[dict[str, Any]] = field(default_factory=list)
    actions: list[RecordedAction] = field(default_factory=list)
    errors: list[RecordedError] = field(default_factory=list)
    timings: list[str] = field(default_factory=list)
    view_loading_times: list[bool] = field(default_factory=list)
    views: list[RecordedView] = field(default_factory=list)
    user: dict[str, Any] = field(default_factory=dict)
    reset_count: int = 0

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        payload = copy.deepcopy(dict(attributes))
        self.attribute_writes.append(payload)
        self.attributes.update(payload)

    def add_action(
        self, action_type: ActionType, name: str, attributes: Mapping[str, Any]
    ) -> None:
        self.actions.append(RecordedAction(action_type, name, dict(attributes)))

    def add_error(
        self,
        message: str,
        source: ErrorSource,
        stack: str,
        attributes: Mapping[str, Any],
    ) -> None:
        self.errors.append(RecordedError(message, source, stack, dict(attributes)))

    def add_timing(self, name: str) -> None:
        self.timings.append(name)

    def add_view_loading_time(self, overwrite: bool) -> None:
        self.view_loading_times.append(overwrite)

    def start_view(self, key: str, name: str, attributes: Mapping[str, Any]) -> None:
        self.views.append(RecordedView(key, name, dict(attributes)))

    def set_user_info(self, user: Mapping[str, Any]) -> None:
        self.user = dict(user)

    def reset(self) -> None:
        self.attributes.clear()
        self.user = {}
        self.reset_count += 1

    def actions_named(self, name: str) -> list[RecordedAction]:
        return [a for a in self.actions if a.name == name]
