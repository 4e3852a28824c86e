"""Typed event dataclasses for the rumkit event bus.

All events are frozen dataclasses. EventBusSink emits one per backend
write; subscribers (structured logs, JSONL, metrics, alerts) route them.
Enum-valued fields are carried as plain strings so events serialize
without custom encoders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Session attributes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AttributesPublished:
    attributes: dict[str, Any]
    pending_count: int | None  # None when the write carried no registry snapshot
    timestamp: str


@dataclass(frozen=True)
class UserInfoSet:
    user_id: str | None  # None on clear
    has_email: bool
    timestamp: str


@dataclass(frozen=True)
class SinkReset:
    timestamp: str


# ---------------------------------------------------------------------------
# Discrete events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActionAdded:
    action_type: str  # "tap" | "scroll" | "swipe" | "back" | "custom"
    name: str
    attributes: dict[str, Any]
    timestamp: str


@dataclass(frozen=True)
class ErrorAdded:
    message: str
    source: str  # "source" | "network" | "webview" | "console" | "custom"
    stack: str
    attributes: dict[str, Any]
    timestamp: str


@dataclass(frozen=True)
class TimingAdded:
    name: str
    timestamp: str


@dataclass(frozen=True)
class ViewLoadingTimeAdded:
    overwrite: bool
    timestamp: str


@dataclass(frozen=True)
class ViewStarted:
    key: str
    name: str
    previous_view: str | None
    attributes: dict[str, Any] = field(default_factory=dict)
    timestamp: str = ""


ALL_EVENTS = (
    AttributesPublished,
    UserInfoSet,
    SinkReset,
    ActionAdded,
    ErrorAdded,
    TimingAdded,
    ViewLoadingTimeAdded,
    ViewStarted,
)
