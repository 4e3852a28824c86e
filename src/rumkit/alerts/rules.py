"""Built-in alert rules for rumkit."""

from __future__ import annotations

from rumkit.alerts.base import AlertRule
from rumkit.events import ActionAdded, AttributesPublished, ErrorAdded

# One dropped frame at 60 fps
SLOW_RENDER_MS = 16.0


def _is_stuck(event: object, threshold: int) -> bool:
    return (
        isinstance(event, AttributesPublished)
        and event.pending_count is not None
        and event.pending_count >= threshold
    )


def _is_slow_render(event: object) -> bool:
    if not isinstance(event, ActionAdded) or "render_phase" not in event.attributes:
        return False
    duration = event.attributes.get("actual_duration_ms")
    return isinstance(duration, (int, float)) and duration > SLOW_RENDER_MS


def build_rules(pending_threshold: int = 1) -> list[AlertRule]:
    """Fresh rule instances; each carries its own cooldown state."""
    return [
        AlertRule(
            name="stuck_loads",
            description=f"{pending_threshold}+ tracked elements still loading",
            severity="warning",
            condition=lambda e: _is_stuck(e, pending_threshold),
        ),
        AlertRule(
            name="element_load_failed",
            description="A tracked element failed to load",
            severity="warning",
            condition=lambda e: isinstance(e, ErrorAdded) and "element" in e.attributes,
        ),
        AlertRule(
            name="slow_render",
            description=f"Render sample exceeded {SLOW_RENDER_MS:g}ms",
            severity="info",
            condition=_is_slow_render,
        ),
    ]
