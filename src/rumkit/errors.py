"""Exception hierarchy for rumkit.

Telemetry failures never surface as exceptions to callers of the core
(see rumkit.sinks.guarded). These types cover the places that do raise:
configuration parsing and the CLI.
"""

from __future__ import annotations


class RumkitError(Exception):
    """Base class for rumkit errors."""


class ConfigError(RumkitError, ValueError):
    """A configuration value is missing, malformed, or out of range."""
