"""Build the CI upload config (API/app keys, site, mobile app id, version).

Values come from the process environment, falling back to a .env file.
Non-empty variables already set in the environment win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

DEFAULT_SITE = "datadoghq.com"
PLATFORMS = ("ios", "android")


@dataclass
class CiConfigResult:
    config: dict[str, str]
    warnings: list[str] = field(default_factory=list)


def load_environment(env_file: Path | None) -> dict[str, str]:
    """os.environ layered over the .env file, if it exists."""
    merged: dict[str, str] = {}
    if env_file is not None and env_file.exists():
        merged.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    # an empty variable does not mask the file value
    merged.update({k: v for k, v in os.environ.items() if v})
    return merged


def _first(env: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def build_ci_config(
    env: Mapping[str, str],
    platform: str | None = None,
    version: str | None = None,
) -> CiConfigResult:
    """Map environment variables to CI config keys; missing keys are left out."""
    mobile_app_id = env.get("DATADOG_SYNTHETICS_MOBILE_APPLICATION_ID") or None
    if platform == "ios":
        mobile_app_id = env.get("DATADOG_IOS_APP_ID") or mobile_app_id
    elif platform == "android":
        mobile_app_id = env.get("DATADOG_ANDROID_APP_ID") or mobile_app_id

    candidate = {
        "apiKey": _first(env, "DD_API_KEY", "DATADOG_API_KEY"),
        "appKey": _first(env, "DD_APP_KEY", "DATADOG_APP_KEY"),
        "datadogSite": env.get("DATADOG_SITE") or DEFAULT_SITE,
        "mobileApplicationId": mobile_app_id,
        "versionName": version,
    }
    config = {k: v for k, v in candidate.items() if v is not None}

    warnings: list[str] = []
    if "apiKey" not in config or "appKey" not in config:
        warnings.append("API/App keys not found in environment variables or .env file.")
    if "mobileApplicationId" not in config:
        warnings.append(
            "Mobile Application ID not found. Upload might require it as a CLI argument."
        )
    return CiConfigResult(config=config, warnings=warnings)
