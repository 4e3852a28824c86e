"""tracked_loading: wrap a load in begin / mark_success / mark_failure.

Usage:
    @tracked_loading(session.registry, "FetchUsersList")
    async def load_users(): ...

    with tracked_loading(session.registry, "HeroImage"):
        render_hero()

Normal exit marks success, an exception marks failure with that
exception and is re-raised. Each call of a decorated function is a new
begin() of the same name, so overlapping calls follow the registry's
last-name-wins rule.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, TypeVar

from rumkit.registry import CompletionHandle, LoadingRegistry

F = TypeVar("F", bound=Callable[..., Any])


class _TrackedLoading:
    def __init__(self, registry: LoadingRegistry, name: str) -> None:
        self._registry = registry
        self._name = name
        # one handle per active entry; the same instance may be entered by overlapping tasks
        self._handles: list[CompletionHandle] = []

    def __enter__(self) -> CompletionHandle:
        handle = self._registry.begin(self._name)
        self._handles.append(handle)
        return handle

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        if self._handles:
            _finish(self._handles.pop(), exc)
        return False

    async def __aenter__(self) -> CompletionHandle:
        return self.__enter__()

    async def __aexit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        return self.__exit__(exc_type, exc, tb)

    def __call__(self, fn: F) -> F:
        registry, name = self._registry, self._name

        @functools.wraps(fn)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            handle = registry.begin(name)
            try:
                result = fn(*args, **kwargs)
            except Exception as exc:
                handle.mark_failure(exc)
                raise
            handle.mark_success()
            return result

        @functools.wraps(fn)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            handle = registry.begin(name)
            try:
                result = await fn(*args, **kwargs)
            except Exception as exc:
                handle.mark_failure(exc)
                raise
            handle.mark_success()
            return result

        if inspect.iscoroutinefunction(fn):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper  # type: ignore[return-value]


def _finish(handle: CompletionHandle, exc: BaseException | None) -> None:
    if exc is None:
        handle.mark_success()
    elif isinstance(exc, Exception):
        handle.mark_failure(exc)
    # KeyboardInterrupt, CancelledError and friends leave the load pending


def tracked_loading(registry: LoadingRegistry, name: str) -> _TrackedLoading:
    """Decorator / context manager that tracks `name` in `registry`."""
    return _TrackedLoading(registry, name)
