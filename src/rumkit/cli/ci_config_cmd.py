"""CLI command for generating the CI upload config file."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from rumkit.cli._errors import handle_error

app = typer.Typer(help="Generate CI upload configuration.")


@app.command("generate")
def ci_config_generate(
    platform: str = typer.Option(
        None, "--platform", "-p", help="Target platform: ios or android"
    ),
    env_file: Path = typer.Option(
        Path(".env"), "--env-file", help=".env file read for unset variables"
    ),
    output: Path = typer.Option(
        Path("datadog-ci.json"), "--output", "-o", help="Where to write the JSON"
    ),
) -> None:
    """Write datadog-ci.json from DD_*/DATADOG_* environment variables.

    Examples:
        rumkit ci-config generate --platform ios
        rumkit ci-config generate --env-file ../.env -o build/datadog-ci.json
    """
    from rumkit.ci_config import PLATFORMS, build_ci_config, load_environment
    from rumkit.versioning import resolve_version

    if platform is not None and platform not in PLATFORMS:
        handle_error(f"Unknown platform {platform!r}. Choose from: {', '.join(PLATFORMS)}")

    result = build_ci_config(
        load_environment(env_file),
        platform=platform,
        version=resolve_version(),
    )
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(result.config, indent=2) + "\n")
    except OSError as e:
        handle_error(f"Could not write {output}: {e}")

    typer.echo(f"Generated {output} from environment variables.")
