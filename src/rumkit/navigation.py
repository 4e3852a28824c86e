"""View transition detection from nested navigation state.

A navigation tree is the state object of a navigation container:

    {"index": 1, "routes": [
        {"name": "Login"},
        {"name": "Main", "state": {"index": 0, "routes": [{"name": "Users"}]}},
    ]}

The active leaf is found by following `index` at each level and
descending into a route's nested `state` when it has one. When `index`
is missing the last route is active (stack navigators push to the end).

ViewTransitionDetector reports one transition per change of leaf name.
The first observation only primes it (the initial mount is not a
transition), and changes above the leaf that keep the same leaf name
are ignored. Malformed trees (no routes, index out of range, unnamed
route) have no active leaf and never produce a transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from rumkit.logging import get_logger
from rumkit.sinks.base import RumSink
from rumkit.sinks.guarded import GuardedSink

# Nested navigators are rarely more than a handful deep; this only stops cycles.
MAX_DEPTH = 32


def _get_logger():
    return get_logger("rumkit.navigation")


@dataclass(frozen=True)
class Route:
    name: str
    key: str


@dataclass(frozen=True)
class ViewTransition:
    from_view: str | None
    to_view: str
    to_key: str


def _field(node: Any, name: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def find_active_leaf(tree: Any) -> Route | None:
    """The innermost active route of `tree`, or None if the tree is malformed."""
    node = tree
    for _ in range(MAX_DEPTH):
        if node is None:
            return None
        routes = _field(node, "routes")
        if not isinstance(routes, (list, tuple)) or not routes:
            return None

        index = _field(node, "index")
        if index is None:
            index = len(routes) - 1
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if not 0 <= index < len(routes):
            return None

        route = routes[index]
        nested = _field(route, "state")
        if nested is not None:
            node = nested
            continue

        name = _field(route, "name")
        if not isinstance(name, str) or not name:
            return None
        key = _field(route, "key")
        return Route(name=name, key=key if isinstance(key, str) and key else name)
    return None


class ViewTransitionDetector:
    """Turns a stream of navigation trees into deduplicated view transitions.

    Args:
        sink: Backend to publish transitions to (start_view).
        view_name: Maps the leaf route to a view name. Defaults to the route name.
    """

    def __init__(
        self,
        sink: RumSink | GuardedSink,
        view_name: Callable[[Route], str] | None = None,
    ) -> None:
        self._sink = sink if isinstance(sink, GuardedSink) else GuardedSink(sink)
        self._view_name = view_name or (lambda route: route.name)
        self._last_view: str | None = None
        self._initial = True

    @property
    def last_view(self) -> str | None:
        return self._last_view

    @property
    def is_initial_observation(self) -> bool:
        return self._initial

    def observe(self, tree: Any) -> ViewTransition | None:
        """Feed the current navigation state; returns the transition, if any."""
        leaf = find_active_leaf(tree)
        name = self._resolve_name(leaf) if leaf is not None else None

        if self._initial:
            self._initial = False
            self._last_view = name
            _get_logger().debug("navigation.initial", view=name)
            return None

        if leaf is None or name is None or name == self._last_view:
            return None

        transition = ViewTransition(from_view=self._last_view, to_view=name, to_key=leaf.key)
        self._last_view = name

        outcome = self._sink.start_view(
            transition.to_key, transition.to_view, {"previous_view": transition.from_view}
        )
        _get_logger().info(
            "navigation.transition",
            from_view=transition.from_view,
            to_view=transition.to_view,
            published=outcome.ok,
        )
        return transition

    def _resolve_name(self, leaf: Route) -> str | None:
        try:
            return self._view_name(leaf)
        except Exception:
            _get_logger().warning("navigation.view_name_failed", route=leaf.name, exc_info=True)
            return None

    def reset(self) -> None:
        """Back to the initial state; the next observation primes again."""
        self._last_view = None
        self._initial = True
