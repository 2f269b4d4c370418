"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from docpicker.cli import cli
from docpicker.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".docpicker" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "cache:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "cache.prefix", "--value", "picked-"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert "picked-" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.cache.prefix == "picked-"


def test_config_set_same_value_reports_no_change(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "cache.prefix", "--value", "prefix"], env=env)

    assert result.exit_code == 0
    assert "No changes applied" in result.output


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "cache.buffer_size", "--value", "0"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output


def test_config_edit_applies_changes(tmp_path: Path, monkeypatch) -> None:
    runner = CliRunner()
    manager = ConfigManager(config_path=_config_path(tmp_path))
    manager.ensure_exists()

    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("level: WARNING", "level: DEBUG")

    monkeypatch.setattr("docpicker.cli.click.edit", _mock_edit)

    result = runner.invoke(cli, ["config", "edit"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "updated" in result.output.lower()
    assert manager.load(include_env=False).logging.level == "DEBUG"


def test_config_view_as_env_prints_variables(tmp_path: Path) -> None:
    runner = CliRunner()
    runner.invoke(
        cli, ["config", "set", "cache.prefix", "--value", "picked-"], env=_env_with_home(tmp_path)
    )

    result = runner.invoke(
        cli, ["config", "view", "--no-env", "--as-env"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "DOCPICKER__CACHE__PREFIX=picked-" in lines
    assert "DOCPICKER__CACHE__BUFFER_SIZE=1024" in lines
    assert "DOCPICKER__CONTENT__SCHEMES=[content, file]" in lines
