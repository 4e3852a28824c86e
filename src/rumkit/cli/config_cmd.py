"""CLI commands for inspecting the effective configuration."""

from __future__ import annotations

import json

import typer

from rumkit.cli._errors import reports_errors

app = typer.Typer(help="Inspect rumkit configuration.")


@app.command("show")
@reports_errors
def config_show(
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
) -> None:
    """Show the RumConfig resolved from the environment (client token masked)."""
    from rumkit.config import RumConfig

    values = RumConfig().sanitized()
    if as_json:
        typer.echo(json.dumps(values, indent=2, default=str))
        return

    width = max(len(k) for k in values)
    for key, value in values.items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        elif value is None:
            value = "-"
        typer.echo(f"{key.ljust(width)}  {value}")
