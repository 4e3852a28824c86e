"""Routes bus events to structured log lines via the configured LogFormatter.

Always-on subscriber. Uses get_logger() from rumkit.logging, so it works
with structlog, stdlib, or any registered LogFormatter.
"""

from __future__ import annotations

from dataclasses import asdict

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
from rumkit.linker import RumEventLinker
from rumkit.logging import get_logger


def _get_logger():
    """Lazy logger -- always reflects the active formatter, not stale import-time state."""
    return get_logger("rumkit.events")


def _to_dict(event: object) -> dict:
    return asdict(event)  # type: ignore[arg-type]


def register_structlog_subscriber() -> None:
    """Register log handlers for all events on RumEventLinker."""

    @RumEventLinker.on(AttributesPublished)
    def _log_attributes(event: AttributesPublished) -> None:
        _get_logger().debug("rum.attributes", **_to_dict(event))

    @RumEventLinker.on(ActionAdded)
    def _log_action(event: ActionAdded) -> None:
        _get_logger().info("rum.action", **_to_dict(event))

    @RumEventLinker.on(ErrorAdded)
    def _log_error(event: ErrorAdded) -> None:
        _get_logger().warning("rum.error", **_to_dict(event))

    @RumEventLinker.on(TimingAdded)
    def _log_timing(event: TimingAdded) -> None:
        _get_logger().info("rum.timing", **_to_dict(event))

    @RumEventLinker.on(ViewLoadingTimeAdded)
    def _log_view_loading_time(event: ViewLoadingTimeAdded) -> None:
        _get_logger().info("rum.view_loading_time", **_to_dict(event))

    @RumEventLinker.on(ViewStarted)
    def _log_view_started(event: ViewStarted) -> None:
        _get_logger().info("rum.view_started", **_to_dict(event))

    # user_id only; names and emails stay out of logs
    @RumEventLinker.on(UserInfoSet)
    def _log_user(event: UserInfoSet) -> None:
        _get_logger().info("rum.user", **_to_dict(event))

    @RumEventLinker.on(SinkReset)
    def _log_reset(event: SinkReset) -> None:
        _get_logger().info("rum.reset", **_to_dict(event))
