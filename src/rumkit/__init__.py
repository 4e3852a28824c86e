"""rumkit: client-side RUM instrumentation core.

Public API:
    RumSession          owns the registry, navigation detector and emitter
    LoadingRegistry     begin(name) -> CompletionHandle (mark_success / mark_failure)
    ViewTransitionDetector  observe(navigation_tree) -> ViewTransition | None
    ActionEmitter       emit_action / emit_named_timing / emit_render_sample
    tracked_loading     decorator / context manager over the registry

Event bus (structured logs, JSONL, OTel metrics, alerts):
    configure(cfg)  -- initialize emitter + subscribers (call once at startup)
    emit(event)     -- fire-and-forget (no-op if not configured)
    reset()         -- reset for testing
"""

__version__ = "0.3.0"

from rumkit.actions import ActionEmitter, GuardState, RenderSampleFilter, TimingGuard
from rumkit.config import LoggingConfig, RumConfig
from rumkit.emitter import configure, emit, is_configured, reset
from rumkit.errors import ConfigError, RumkitError
from rumkit.logging import get_logger, register_destination, register_formatter
from rumkit.navigation import Route, ViewTransition, ViewTransitionDetector, find_active_leaf
from rumkit.registry import (
    CompletionHandle,
    LoadingRegistry,
    OperationState,
    RegistrySnapshot,
    TrackedOperation,
)
from rumkit.session import RumSession
from rumkit.sinks import (
    ActionType,
    ErrorSource,
    EventBusSink,
    GuardedSink,
    NoOpSink,
    PublishOutcome,
    RecordingSink,
    RumSink,
)
from rumkit.tracking import tracked_loading

__all__ = [
    "__version__",
    # Session
    "RumSession",
    # Loading registry
    "LoadingRegistry",
    "CompletionHandle",
    "TrackedOperation",
    "RegistrySnapshot",
    "OperationState",
    "tracked_loading",
    # Navigation
    "ViewTransitionDetector",
    "ViewTransition",
    "Route",
    "find_active_leaf",
    # Actions / timings
    "ActionEmitter",
    "TimingGuard",
    "GuardState",
    "RenderSampleFilter",
    # Sinks
    "RumSink",
    "GuardedSink",
    "PublishOutcome",
    "RecordingSink",
    "NoOpSink",
    "EventBusSink",
    "ActionType",
    "ErrorSource",
    # Config / errors
    "RumConfig",
    "LoggingConfig",
    "RumkitError",
    "ConfigError",
    # Event bus + logging
    "configure",
    "emit",
    "is_configured",
    "reset",
    "get_logger",
    "register_formatter",
    "register_destination",
]
