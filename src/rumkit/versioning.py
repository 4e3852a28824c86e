"""Release version resolution for builds and sourcemap uploads.

Order:
    1. latest git tag, leading "v" stripped   (v1.4.0 -> 1.4.0)
    2. package version + short commit hash    (0.3.0-1a2b3c4)
    3. package version
"""

from __future__ import annotations

import subprocess
from pathlib import Path


def _git(*args: str, cwd: Path | None = None) -> str | None:
    try:
        out = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.stdout.strip() or None


def resolve_version(package_version: str | None = None, cwd: Path | None = None) -> str:
    if package_version is None:
        from rumkit import __version__

        package_version = __version__

    tag = _git("describe", "--tags", "--abbrev=0", cwd=cwd)
    if tag:
        return tag[1:] if tag.startswith("v") else tag

    short_hash = _git("rev-parse", "--short", "HEAD", cwd=cwd)
    if short_hash:
        return f"{package_version}-{short_hash}"

    return package_version
