"""Tests for the rumkit CLI.

Uses typer.testing.CliRunner for isolated CLI testing.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from rumkit.cli import app

runner = CliRunner()

_CI_VARS = [
    "DD_API_KEY",
    "DATADOG_API_KEY",
    "DD_APP_KEY",
    "DATADOG_APP_KEY",
    "DATADOG_SITE",
    "DATADOG_SYNTHETICS_MOBILE_APPLICATION_ID",
    "DATADOG_IOS_APP_ID",
    "DATADOG_ANDROID_APP_ID",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in _CI_VARS:
        monkeypatch.delenv(var, raising=False)
    for var in ("RUMKIT_CLIENT_TOKEN", "RUMKIT_SESSION_SAMPLING_RATE", "RUMKIT_DEV_MODE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _fixed_version(monkeypatch):
    monkeypatch.setattr("rumkit.versioning.resolve_version", lambda *a, **kw: "1.4.0")


class TestAppStructure:
    def test_app_has_all_subcommands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "config" in result.output
        assert "ci-config" in result.output
        assert "version" in result.output

    def test_ci_config_help(self):
        result = runner.invoke(app, ["ci-config", "--help"])
        assert result.exit_code == 0
        assert "generate" in result.output


class TestVersion:
    def test_prints_resolved_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.output.strip() == "1.4.0"


class TestConfigShow:
    def test_table(self, monkeypatch):
        monkeypatch.setenv("RUMKIT_CLIENT_TOKEN", "pubabcdef123")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "session_sampling_rate" in result.output
        assert "pubabcdef123" not in result.output
        assert "puba****" in result.output

    def test_json(self):
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["session_sampling_rate"] == 100.0
        assert data["first_party_hosts"] == []

    def test_bad_env_reports_error(self, monkeypatch):
        monkeypatch.setenv("RUMKIT_SESSION_SAMPLING_RATE", "250")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "session_sampling_rate" in result.output


class TestCiConfigGenerate:
    def test_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "DD_API_KEY=api-123\n"
            "DD_APP_KEY=app-456\n"
            "DATADOG_SITE=datadoghq.eu\n"
            "DATADOG_IOS_APP_ID=ios-app\n"
            "DATADOG_ANDROID_APP_ID=android-app\n"
        )
        output = tmp_path / "out" / "datadog-ci.json"

        result = runner.invoke(
            app,
            ["ci-config", "generate", "--platform", "android", "--env-file", str(env_file), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert f"Generated {output}" in result.output
        assert json.loads(output.read_text()) == {
            "apiKey": "api-123",
            "appKey": "app-456",
            "datadogSite": "datadoghq.eu",
            "mobileApplicationId": "android-app",
            "versionName": "1.4.0",
        }

    def test_missing_keys_warn_but_succeed(self, tmp_path):
        output = tmp_path / "datadog-ci.json"
        result = runner.invoke(
            app,
            ["ci-config", "generate", "--env-file", str(tmp_path / "absent.env"), "-o", str(output)],
        )
        assert result.exit_code == 0
        assert "API/App keys not found" in result.output
        assert "Mobile Application ID not found" in result.output
        assert json.loads(output.read_text()) == {
            "datadogSite": "datadoghq.com",
            "versionName": "1.4.0",
        }

    def test_unknown_platform(self, tmp_path):
        result = runner.invoke(
            app, ["ci-config", "generate", "-p", "windows", "-o", str(tmp_path / "x.json")]
        )
        assert result.exit_code == 1
        assert "Unknown platform" in result.output
        assert not (tmp_path / "x.json").exists()
