"""CLI tests for the pick command."""

import json

import pytest
from typer.testing import CliRunner

from sw_ui import cli

pytestmark = pytest.mark.unit_ui

runner = CliRunner()

OPTIONS_YAML = """\
- name: Option 1
  value: option-1
- name: Option 2
  value: option-2
- label: Group 1
  options:
    - name: Option 3
      value: option-3
"""


@pytest.fixture
def options_file(tmp_path, monkeypatch):
    monkeypatch.delenv("SW_HEADLESS", raising=False)
    path = tmp_path / "options.yaml"
    path.write_text(OPTIONS_YAML)
    return path


def test_pick_replays_events_and_prints_value(options_file) -> None:
    result = runner.invoke(
        cli.app,
        ["pick", str(options_file), "-e", "click", "-e", "input:option 3", "-e", "key:Enter"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout.strip()) == "option-3"


def test_pick_multiple_prints_json_list(options_file) -> None:
    result = runner.invoke(
        cli.app,
        ["pick", str(options_file), "--multiple", "-e", "click", "-e", "option:option-1", "-e", "option:option-3"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout.strip()) == ["option-1", "option-3"]


def test_pick_with_creation(options_file) -> None:
    result = runner.invoke(
        cli.app,
        ["pick", str(options_file), "--create", "-e", "click", "-e", "input:Brand New", "-e", "option:Create Brand New"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout.strip()) == "brand-new"


def test_headless_env_returns_initial_selection(options_file, monkeypatch) -> None:
    monkeypatch.setenv("SW_HEADLESS", "1")

    result = runner.invoke(cli.app, ["pick", str(options_file), "-i", "option-2"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout.strip()) == "option-2"


def test_no_terminal_cancels_selection(options_file) -> None:
    result = runner.invoke(cli.app, ["pick", str(options_file)])

    assert result.exit_code == 1
    assert "Selection cancelled." in result.output


def test_missing_file_exits_with_error(tmp_path) -> None:
    result = runner.invoke(cli.app, ["pick", str(tmp_path / "missing.yaml"), "--headless"])

    assert result.exit_code == 1


def test_unknown_event_is_reported(options_file) -> None:
    result = runner.invoke(cli.app, ["pick", str(options_file), "-e", "scroll:down"])

    assert result.exit_code == 2
    assert "ConfigurationError" in result.output
