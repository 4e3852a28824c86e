"""rumkit CLI -- typer-based command interface.

Commands:
    rumkit config show             Effective capture configuration
    rumkit ci-config generate      Write datadog-ci.json from the environment
    rumkit version                 Resolved release version
"""

from __future__ import annotations

import typer

from rumkit.cli import ci_config_cmd, config_cmd

app = typer.Typer(
    name="rumkit",
    help="Client-side RUM instrumentation: configuration and release tooling.",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")
app.add_typer(ci_config_cmd.app, name="ci-config")


@app.command("version")
def version() -> None:
    """Print the release version (git tag, or package version + commit)."""
    from rumkit.versioning import resolve_version

    typer.echo(resolve_version())


def main() -> None:
    """Entry point for the rumkit CLI."""
    app()
