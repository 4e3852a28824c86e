"""CLI error handling."""

from __future__ import annotations

import functools
from typing import Any, Callable

import typer

from rumkit.errors import RumkitError


def handle_error(msg: str) -> None:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def reports_errors(f: Callable) -> Callable:
    """Turn RumkitError (bad env, bad config) into a one-line error + exit 1."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except RumkitError as exc:
            handle_error(str(exc))

    return wrapper
