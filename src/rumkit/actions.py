"""Action and timing emission for screens.

Stateless forwarding of user interactions, named timings and render
cost samples to the backend. Nothing here raises because of the
backend; every call goes through a GuardedSink.

One-shot timings ("hero image shown", "view finished loading") are
guarded by a TimingGuard that the caller owns and passes back in. Each
emit_* call returns the guard's next state:

    guard = TimingGuard()
    guard = emitter.emit_named_timing("hero_image_loaded", image_ready, guard)

The guard only moves to OBSERVED once the backend accepted the write,
so a failed publish is retried on the next call.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping

from rumkit.logging import get_logger
from rumkit.sinks.base import ActionType, RumSink
from rumkit.sinks.guarded import GuardedSink

if TYPE_CHECKING:
    from rumkit.config import RumConfig


def _get_logger():
    return get_logger("rumkit.actions")


class GuardState(str, Enum):
    NOT_STARTED = "not_started"
    OBSERVED = "observed"


@dataclass(frozen=True)
class TimingGuard:
    """Caller-owned one-shot state for a single logical mount."""

    state: GuardState = GuardState.NOT_STARTED

    @property
    def observed(self) -> bool:
        return self.state is GuardState.OBSERVED

    def advance(self) -> TimingGuard:
        return TimingGuard(GuardState.OBSERVED)


@dataclass
class RenderSampleFilter:
    """Which render samples get forwarded. The defaults forward all of them."""

    min_duration_ms: float = 0.0
    sample_rate: float = 100.0
    rng: Callable[[], float] = field(default=random.random, repr=False)

    @classmethod
    def from_config(cls, config: RumConfig) -> RenderSampleFilter:
        return cls(
            min_duration_ms=config.render_min_duration_ms,
            sample_rate=config.render_sample_rate,
        )

    def accepts(self, actual_duration_ms: float) -> bool:
        if actual_duration_ms < self.min_duration_ms:
            return False
        if self.sample_rate >= 100.0:
            return True
        return self.rng() * 100.0 < self.sample_rate


class ActionEmitter:
    """Forwards discrete actions, one-shot timings and render samples."""

    def __init__(
        self,
        sink: RumSink | GuardedSink,
        render_filter: RenderSampleFilter | None = None,
    ) -> None:
        self._sink = sink if isinstance(sink, GuardedSink) else GuardedSink(sink)
        self._render_filter = render_filter or RenderSampleFilter()

    def emit_action(
        self,
        name: str,
        kind: str | ActionType = ActionType.CUSTOM,
        attributes: Mapping[str, Any] | None = None,
    ) -> bool:
        """Report a user interaction. Returns whether the backend accepted it."""
        action_type = ActionType.from_kind(kind)
        return self._sink.add_action(action_type, name, dict(attributes or {})).ok

    def emit_named_timing(self, name: str, condition: bool, guard: TimingGuard) -> TimingGuard:
        """Add timing `name` once, the first time `condition` holds."""
        if guard.observed or not condition:
            return guard
        if not self._sink.add_timing(name).ok:
            return guard
        _get_logger().debug("timing.added", timing=name)
        return guard.advance()

    def emit_component_mounted(self, name: str, guard: TimingGuard) -> TimingGuard:
        """Timing `<name>_mounted` for a component's first mount."""
        return self.emit_named_timing(f"{name}_mounted", True, guard)

    def emit_view_loading_complete(self, is_loaded: bool, guard: TimingGuard) -> TimingGuard:
        """Mark the current view as loaded, once."""
        if guard.observed or not is_loaded:
            return guard
        if not self._sink.add_view_loading_time(True).ok:
            return guard
        _get_logger().debug("view.loading_complete")
        return guard.advance()

    def emit_render_sample(
        self,
        profiler_id: str,
        phase: str,
        actual_duration_ms: float,
        base_duration_ms: float,
        start_time: float,
        commit_time: float,
    ) -> bool:
        """Forward one render measurement as `<profiler_id>_rendered`.

        Returns False when the sample was filtered out or not accepted.
        """
        if not self._render_filter.accepts(actual_duration_ms):
            return False
        return self._sink.add_action(
            ActionType.CUSTOM,
            f"{profiler_id}_rendered",
            {
                "profiler_id": profiler_id,
                "render_phase": phase,
                "actual_duration_ms": actual_duration_ms,
                "base_duration_ms": base_duration_ms,
                "start_time": start_time,
                "commit_time": commit_time,
            },
        ).ok
