"""RumSession: the explicitly owned instrumentation state of one process.

Build one at startup and hand it (or its parts) to whatever needs it:

    session = RumSession(RumConfig()).start()
    handle = session.registry.begin("FetchUsersList")
    ...
    session.close()

The session owns the only mutable telemetry state: the loading registry
and the navigation detector. close() clears both and resets the sink.
Sampling is decided once, at construction; an unsampled session keeps
working but publishes into a NoOpSink.
"""

from __future__ import annotations

import random
from typing import Any, Callable, Mapping

from rumkit.actions import ActionEmitter, RenderSampleFilter
from rumkit.config import RumConfig
from rumkit.logging import bind_session_context, clear_session_context, get_logger
from rumkit.navigation import ViewTransition, ViewTransitionDetector
from rumkit.registry import CompletionHandle, LoadingRegistry, monotonic_ms
from rumkit.sinks.base import RumSink
from rumkit.sinks.bus_sink import EventBusSink
from rumkit.sinks.guarded import GuardedSink, PublishOutcome
from rumkit.sinks.noop_sink import NoOpSink


def _get_logger():
    return get_logger("rumkit.session")


class RumSession:
    """Owns the sink boundary, the loading registry, the navigation detector
    and the action emitter for one process lifetime.

    Args:
        config: Capture settings. Read from the environment when omitted.
        sink: Backend. Defaults to EventBusSink, which is silent until
            rumkit.configure() has been called.
        clock: Millisecond clock for the registry.
        rng: Uniform [0, 1) source for the sampling decision.
    """

    def __init__(
        self,
        config: RumConfig | None = None,
        sink: RumSink | None = None,
        clock: Callable[[], float] = monotonic_ms,
        rng: Callable[[], float] = random.random,
    ) -> None:
        self.config = config or RumConfig()
        self.sampled = rng() * 100.0 < self.config.session_sampling_rate
        backend: RumSink = sink if sink is not None else EventBusSink()
        if not self.sampled:
            backend = NoOpSink()

        self.sink = GuardedSink(backend)
        self.registry = LoadingRegistry(self.sink, clock=clock)
        self.navigation = ViewTransitionDetector(self.sink)
        self.actions = ActionEmitter(self.sink, RenderSampleFilter.from_config(self.config))
        self._started = False
        self._closed = False

    @property
    def is_active(self) -> bool:
        return self._started and not self._closed

    def start(self) -> RumSession:
        """Publish the initial session attributes. Safe to call twice."""
        if self._started:
            return self
        self._started = True
        self._closed = False
        bind_session_context(**self._context())
        _get_logger().info("session.started", sampled=self.sampled, **self.config.sanitized())

        attributes: dict[str, Any] = {
            "env": self.config.env,
            "service": self.config.service,
        }
        if self.config.version:
            attributes["version"] = self.config.version
        attributes.update(self.registry.snapshot().to_attributes())
        self.sink.set_attributes(attributes)
        return self

    def close(self) -> None:
        """Drop all tracked operations, forget navigation, reset the sink."""
        if self._closed:
            return
        self._closed = True
        pending = self.registry.snapshot().loading_elements
        self.registry.clear()
        self.navigation.reset()
        self.sink.reset()
        self._started = False
        _get_logger().info("session.closed", abandoned_loads=list(pending))
        clear_session_context(*self._context())

    def _context(self) -> dict[str, Any]:
        return {
            "rum_env": self.config.env,
            "rum_service": self.config.service,
            "rum_sampled": self.sampled,
        }

    def __enter__(self) -> RumSession:
        return self.start()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- shortcuts ---------------------------------------------------------

    def track(self, name: str) -> CompletionHandle:
        return self.registry.begin(name)

    def observe_navigation(self, tree: Any) -> ViewTransition | None:
        return self.navigation.observe(tree)

    # -- identity ----------------------------------------------------------

    def set_user(
        self,
        id: str | int,
        name: str | None = None,
        email: str | None = None,
        extra_info: Mapping[str, Any] | None = None,
    ) -> PublishOutcome:
        """Attach the signed-in user to the session."""
        user: dict[str, Any] = {"id": str(id)}
        if name is not None:
            user["name"] = name
        if email is not None:
            user["email"] = email
        if extra_info:
            user["extra_info"] = dict(extra_info)
        outcome = self.sink.set_user_info(user)
        _get_logger().info("session.user_set", user_id=user["id"], published=outcome.ok)
        return outcome

    def clear_user(self) -> PublishOutcome:
        """Detach the user, e.g. on logout."""
        outcome = self.sink.set_user_info({})
        _get_logger().info("session.user_cleared", published=outcome.ok)
        return outcome
