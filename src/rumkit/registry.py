"""Loading registry: tracks named, possibly never-completing loads.

UI code opens a tracked operation with begin(name) and later calls
mark_success() or mark_failure() on the returned handle. After every
mutation the registry recomputes a snapshot of all operations and
publishes it as global session attributes:

    components           {name: {"loaded": bool, "duration": ms}}
    loading_elements     names still pending, sorted
    pending_loads_count  number of pending operations
    has_pending_loads    pending_loads_count > 0

An operation that never completes stays pending forever. That is how a
stuck screen shows up on the dashboards (has_pending_loads stays true).

Names are the identity. begin() on a name that is already tracked
replaces the record and restarts its clock, and a handle resolves its
record by name when completed, so a late completion from an earlier
begin() lands on the current record. Completing twice is not rejected
either; the last completion wins.

Single-threaded by contract: all calls come from one event loop.
"""

from __future__ import annotations

import time
import traceback
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Mapping

from rumkit.logging import get_logger
from rumkit.sinks.base import ActionType, ErrorSource, RumSink
from rumkit.sinks.guarded import GuardedSink

UNKNOWN_ERROR = "unknown error"


def _get_logger():
    return get_logger("rumkit.registry")


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class OperationState(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class TrackedOperation:
    """One tracked load. Owned by the registry; callers only get copies."""

    name: str
    started_at: float
    state: OperationState = OperationState.PENDING
    duration_ms: float = 0.0

    @property
    def is_pending(self) -> bool:
        return self.state is OperationState.PENDING


@dataclass(frozen=True)
class RegistrySnapshot:
    """Aggregate view of all tracked operations at one instant."""

    components: dict[str, dict[str, Any]]
    pending_count: int
    loading_elements: tuple[str, ...]

    @property
    def has_pending_loads(self) -> bool:
        return self.pending_count > 0

    @classmethod
    def from_operations(cls, operations: Mapping[str, TrackedOperation]) -> RegistrySnapshot:
        components = {
            name: {
                "loaded": op.state is OperationState.SUCCEEDED,
                "duration": round(op.duration_ms),
            }
            for name, op in operations.items()
        }
        pending = tuple(sorted(name for name, op in operations.items() if op.is_pending))
        return cls(components=components, pending_count=len(pending), loading_elements=pending)

    def to_attributes(self) -> dict[str, Any]:
        return {
            "components": {name: dict(entry) for name, entry in self.components.items()},
            "loading_elements": list(self.loading_elements),
            "pending_loads_count": self.pending_count,
            "has_pending_loads": self.has_pending_loads,
        }


def describe_error(error: Any) -> tuple[str, str]:
    """(message, stack) for whatever a caller passed as the failure cause."""
    if error is None:
        return UNKNOWN_ERROR, UNKNOWN_ERROR
    if isinstance(error, BaseException):
        message = str(error) or type(error).__name__
        if error.__traceback__ is not None:
            stack = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        else:
            stack = f"{type(error).__name__}: {message}"
        return message, stack
    message = str(error) or UNKNOWN_ERROR
    return message, message


class CompletionHandle:
    """Terminal callbacks for one begin() call.

    Holds the name, not the record. See the module docstring.
    """

    __slots__ = ("_registry", "name")

    def __init__(self, registry: LoadingRegistry, name: str) -> None:
        self._registry = registry
        self.name = name

    def mark_success(self, attributes: Mapping[str, Any] | None = None) -> None:
        self._registry._complete(self.name, OperationState.SUCCEEDED, attributes=attributes)

    def mark_failure(
        self, error: Any = None, kind: ErrorSource | str = ErrorSource.SOURCE
    ) -> None:
        self._registry._complete(self.name, OperationState.FAILED, error=error, kind=kind)

    def __repr__(self) -> str:
        return f"CompletionHandle(name={self.name!r})"


class LoadingRegistry:
    """Name -> TrackedOperation map that republishes its snapshot on every change.

    Args:
        sink: Backend to publish to. Wrapped in a GuardedSink if it isn't one.
        clock: Returns the current time in milliseconds. Monotonic by default.
    """

    def __init__(
        self,
        sink: RumSink | GuardedSink,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._sink = sink if isinstance(sink, GuardedSink) else GuardedSink(sink)
        self._clock = clock
        self._operations: dict[str, TrackedOperation] = {}

    def begin(self, name: str) -> CompletionHandle:
        """Start (or restart) tracking `name` and return its completion handle."""
        restarted = name in self._operations
        self._operations[name] = TrackedOperation(name=name, started_at=self._clock())
        _get_logger().debug("registry.begin", element=name, restarted=restarted)
        self._publish()
        return CompletionHandle(self, name)

    def _complete(
        self,
        name: str,
        state: OperationState,
        attributes: Mapping[str, Any] | None = None,
        error: Any = None,
        kind: ErrorSource | str = ErrorSource.SOURCE,
    ) -> None:
        op = self._operations.get(name)
        if op is None:
            _get_logger().debug("registry.complete_unknown", element=name, state=state.value)
            return

        op.duration_ms = max(self._clock() - op.started_at, 0.0)
        op.state = state
        self._publish()

        duration = round(op.duration_ms)
        if state is OperationState.SUCCEEDED:
            _get_logger().debug("registry.success", element=name, duration_ms=duration)
            self._sink.add_action(
                ActionType.CUSTOM,
                f"{name}_loaded",
                {**dict(attributes or {}), "element": name, "duration_ms": duration},
            )
        else:
            message, stack = describe_error(error)
            _get_logger().debug(
                "registry.failure", element=name, duration_ms=duration, error=message
            )
            self._sink.add_error(
                f"{name} failed to load: {message}",
                _error_source(kind),
                stack,
                {"element": name, "duration_ms": duration},
            )

    def _publish(self) -> None:
        self._sink.set_attributes(self.snapshot().to_attributes())

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot.from_operations(self._operations)

    def get(self, name: str) -> TrackedOperation | None:
        """Copy of the current record for `name`, if any."""
        op = self._operations.get(name)
        return replace(op) if op is not None else None

    def clear(self) -> None:
        """Forget every operation, pending ones included, and republish."""
        self._operations.clear()
        self._publish()

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations


def _error_source(kind: ErrorSource | str) -> ErrorSource:
    if isinstance(kind, ErrorSource):
        return kind
    try:
        return ErrorSource(str(kind).lower())
    except ValueError:
        return ErrorSource.CUSTOM
