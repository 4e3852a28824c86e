"""Event-to-metric handlers.

Each handler looks up its instrument in the dict returned by
create_instruments(). Registered once from configure(); the handlers
close over the instruments dict.
"""

from __future__ import annotations

from typing import Any

from rumkit.events import (
    ActionAdded,
    AttributesPublished,
    ErrorAdded,
    TimingAdded,
    ViewStarted,
)
from rumkit.linker import RumEventLinker


def register_metric_handlers(instruments: dict[str, Any]) -> None:
    """Register all event-to-metric handlers on RumEventLinker."""

    @RumEventLinker.on(AttributesPublished)
    def _on_attributes(event: AttributesPublished) -> None:
        if event.pending_count is not None:
            instruments["rumkit_pending_loads"].set(event.pending_count)

    @RumEventLinker.on(ActionAdded)
    def _on_action(event: ActionAdded) -> None:
        instruments["rumkit_actions"].add(1, {"type": event.action_type})
        attrs = event.attributes
        if "render_phase" in attrs:
            duration = attrs.get("actual_duration_ms")
            if isinstance(duration, (int, float)):
                instruments["rumkit_render_duration_seconds"].record(duration / 1000)
        elif "element" in attrs:
            instruments["rumkit_elements_loaded"].add(1)
            duration = attrs.get("duration_ms")
            if isinstance(duration, (int, float)):
                instruments["rumkit_element_load_duration_seconds"].record(duration / 1000)

    @RumEventLinker.on(ErrorAdded)
    def _on_error(event: ErrorAdded) -> None:
        instruments["rumkit_errors"].add(1, {"source": event.source})

    @RumEventLinker.on(TimingAdded)
    def _on_timing(event: TimingAdded) -> None:
        instruments["rumkit_timings"].add(1)

    @RumEventLinker.on(ViewStarted)
    def _on_view_started(event: ViewStarted) -> None:
        instruments["rumkit_view_starts"].add(1)
