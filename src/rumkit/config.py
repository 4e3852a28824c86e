"""rumkit configuration, env-var driven.

All settings have safe defaults. Zero config required for a local
session that records into memory and logs to stderr.

Two dataclasses:
    RumConfig      what the RUM backend bootstrap consumes (sampling,
                   upload batching, verbosity, first-party hosts, ...)
    LoggingConfig  how rumkit itself logs and exports (formatter x
                   destination, OTel, Prometheus, alerts)

Dev mode (RUMKIT_DEV_MODE=1) switches upload batching to frequent/small
and verbosity to debug, unless those are set explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any

from rumkit.errors import ConfigError

UPLOAD_FREQUENCIES = ("default", "frequent")
BATCH_SIZES = ("default", "small")
VERBOSITIES = ("warn", "debug")
TEXT_PRIVACY_LEVELS = ("mask_sensitive_inputs", "mask_all_inputs", "mask_all")
IMAGE_PRIVACY_LEVELS = ("mask_non_bundled_only", "mask_all", "mask_none")
TOUCH_PRIVACY_LEVELS = ("show", "hide")


def _bool_env(var: str, default: bool) -> bool:
    raw = os.environ.get(var)
    if raw is None or raw == "":
        return default
    return raw.lower() in ("1", "true", "on", "yes")


def _float_env(var: str, default: float) -> float:
    raw = os.environ.get(var)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as err:
        raise ConfigError(f"{var}={raw!r} is not a valid number") from err


def _int_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ConfigError(f"{var}={raw!r} is not a valid integer") from err


def _csv_env(var: str) -> tuple[str, ...]:
    raw = os.environ.get(var, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _optional_env(var: str) -> str | None:
    return os.environ.get(var) or None


def _check_choice(name: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ConfigError(f"{name}={value!r} is not one of {list(choices)}")


def _check_percentage(name: str, value: float) -> None:
    if not 0.0 <= value <= 100.0:
        raise ConfigError(f"{name}={value!r} must be between 0 and 100")


@dataclass
class RumConfig:
    """Session capture configuration, env-var driven.

    Pass-through values for the telemetry backend bootstrap. rumkit only
    reads session_sampling_rate, the render sample settings, and the
    identity fields (env/service/version) itself.
    """

    # --- Identity ---
    client_token: str | None = field(
        default_factory=lambda: _optional_env("RUMKIT_CLIENT_TOKEN"), repr=False
    )
    application_id: str | None = field(
        default_factory=lambda: _optional_env("RUMKIT_APPLICATION_ID")
    )
    env: str = field(default_factory=lambda: os.environ.get("RUMKIT_ENV", "dev"))
    service: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_SERVICE", "rumkit-app")
    )
    version: str | None = field(default_factory=lambda: _optional_env("RUMKIT_VERSION"))
    site: str = field(default_factory=lambda: os.environ.get("RUMKIT_SITE", "US1"))

    # --- Capture ---
    session_sampling_rate: float = field(
        default_factory=lambda: _float_env("RUMKIT_SESSION_SAMPLING_RATE", 100.0)
    )
    track_interactions: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_TRACK_INTERACTIONS", True)
    )
    track_resources: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_TRACK_RESOURCES", True)
    )
    track_errors: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_TRACK_ERRORS", True)
    )
    track_background_events: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_TRACK_BACKGROUND_EVENTS", True)
    )
    first_party_hosts: tuple[str, ...] = field(
        default_factory=lambda: _csv_env("RUMKIT_FIRST_PARTY_HOSTS")
    )
    long_task_threshold_ms: float = field(
        default_factory=lambda: _float_env("RUMKIT_LONG_TASK_THRESHOLD_MS", 100.0)
    )
    native_crash_report_enabled: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_NATIVE_CRASH_REPORTS", True)
    )

    # --- Upload (None means "resolve from dev_mode") ---
    dev_mode: bool = field(default_factory=lambda: _bool_env("RUMKIT_DEV_MODE", False))
    upload_frequency: str | None = field(
        default_factory=lambda: _optional_env("RUMKIT_UPLOAD_FREQUENCY")
    )
    batch_size: str | None = field(
        default_factory=lambda: _optional_env("RUMKIT_BATCH_SIZE")
    )
    verbosity: str | None = field(
        default_factory=lambda: _optional_env("RUMKIT_VERBOSITY")
    )

    # --- Render samples ---
    render_min_duration_ms: float = field(
        default_factory=lambda: _float_env("RUMKIT_RENDER_MIN_DURATION_MS", 0.0)
    )
    render_sample_rate: float = field(
        default_factory=lambda: _float_env("RUMKIT_RENDER_SAMPLE_RATE", 100.0)
    )

    # --- Session replay ---
    replay_sample_rate: float = field(
        default_factory=lambda: _float_env("RUMKIT_REPLAY_SAMPLE_RATE", 100.0)
    )
    replay_text_privacy: str = field(
        default_factory=lambda: os.environ.get(
            "RUMKIT_REPLAY_TEXT_PRIVACY", "mask_sensitive_inputs"
        )
    )
    replay_image_privacy: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_REPLAY_IMAGE_PRIVACY", "mask_none")
    )
    replay_touch_privacy: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_REPLAY_TOUCH_PRIVACY", "show")
    )

    def __post_init__(self) -> None:
        if self.upload_frequency is None:
            self.upload_frequency = "frequent" if self.dev_mode else "default"
        if self.batch_size is None:
            self.batch_size = "small" if self.dev_mode else "default"
        if self.verbosity is None:
            self.verbosity = "debug" if self.dev_mode else "warn"

        self.first_party_hosts = tuple(self.first_party_hosts)

        _check_choice("upload_frequency", self.upload_frequency, UPLOAD_FREQUENCIES)
        _check_choice("batch_size", self.batch_size, BATCH_SIZES)
        _check_choice("verbosity", self.verbosity, VERBOSITIES)
        _check_choice("replay_text_privacy", self.replay_text_privacy, TEXT_PRIVACY_LEVELS)
        _check_choice("replay_image_privacy", self.replay_image_privacy, IMAGE_PRIVACY_LEVELS)
        _check_choice("replay_touch_privacy", self.replay_touch_privacy, TOUCH_PRIVACY_LEVELS)
        _check_percentage("session_sampling_rate", self.session_sampling_rate)
        _check_percentage("render_sample_rate", self.render_sample_rate)
        _check_percentage("replay_sample_rate", self.replay_sample_rate)
        if self.render_min_duration_ms < 0:
            raise ConfigError("render_min_duration_ms must not be negative")
        if self.long_task_threshold_ms < 0:
            raise ConfigError("long_task_threshold_ms must not be negative")

    def sanitized(self) -> dict[str, Any]:
        """Plain dict of all settings with the client token masked."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "client_token" and value:
                value = value[:4] + "****"
            elif isinstance(value, tuple):
                value = list(value)
            out[f.name] = value
        return out


@dataclass
class LoggingConfig:
    """How rumkit logs and exports about itself, env-var driven.

    Logging architecture:
        LogFormatter (how records are structured) x LogDestination (where they go)

        Formatter: RUMKIT_LOG_FORMATTER=structlog (default) | stdlib
        Destination: RUMKIT_LOG_DESTINATION=stderr (default) | jsonl
        Renderer: RUMKIT_LOG_FORMAT=json (default) | console
    """

    log_formatter: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_LOG_FORMATTER", "structlog")
    )  # "structlog" | "stdlib"

    log_destination: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_LOG_DESTINATION", "stderr")
    )  # "stderr" | "jsonl"

    log_level: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_LOG_LEVEL", "INFO")
    )

    log_format: str = field(
        default_factory=lambda: os.environ.get("RUMKIT_LOG_FORMAT", "json")
    )  # "json" | "console"

    # JSONL file destination (also used as event sink path)
    jsonl_path: str | None = field(
        default_factory=lambda: os.environ.get("RUMKIT_LOG_PATH")
    )

    # --- OpenTelemetry ---
    otel_enabled: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_OTEL_ENABLED", False)
    )
    otel_endpoint: str = field(
        default_factory=lambda: os.environ.get(
            "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"
        )
    )
    otel_service_name: str = field(
        default_factory=lambda: os.environ.get("OTEL_SERVICE_NAME", "rumkit")
    )

    # --- Prometheus ---
    prometheus_enabled: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_PROMETHEUS_ENABLED", False)
    )
    prometheus_port: int = field(
        default_factory=lambda: _int_env("RUMKIT_PROMETHEUS_PORT", 9464)
    )

    # --- Alerting ---
    alert_enabled: bool = field(
        default_factory=lambda: _bool_env("RUMKIT_ALERTS_ENABLED", False)
    )
    pending_alert_threshold: int = field(
        default_factory=lambda: _int_env("RUMKIT_PENDING_ALERT_THRESHOLD", 1)
    )
