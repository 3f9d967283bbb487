"""
Command-line interface for select-widget-kit.

Loads an option list from YAML/JSON and lets the user pick from it in a
terminal select (or replays scripted events headlessly), printing the chosen
value(s) as JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from sw_common.config.env import env_flag
from sw_common.errors import SelectError
from sw_common.logging import configure_logging
from sw_select.config import SelectConfig
from sw_ui.headless import HeadlessSelect
from sw_ui.protocols import SelectPrompt
from sw_ui.tui.select_app import TerminalSelect

app = typer.Typer(help="Pick options from a select widget in the terminal.", no_args_is_help=True)


@app.callback()
def entry(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default from SW_LOG_LEVEL)."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Global options shared by every command."""
    configure_logging(level=log_level, debug=debug, force=True)


def _resolve_prompt(headless: bool, events: List[str]) -> SelectPrompt:
    env_headless = env_flag("headless")
    if headless or env_headless or events:
        return HeadlessSelect(events=events)
    return TerminalSelect()


@app.command("pick")
def pick(
    options_file: Path = typer.Argument(..., help="YAML or JSON file with the options (or a full config)."),
    multiple: Optional[bool] = typer.Option(None, "--multiple/--single", help="Allow several selections."),
    create: Optional[bool] = typer.Option(None, "--create/--no-create", help="Offer to create unmatched options."),
    initial: Optional[List[str]] = typer.Option(None, "--initial", "-i", help="Initially selected value(s)."),
    title: str = typer.Option("Select", "--title", help="Title shown on the picker frame."),
    headless: bool = typer.Option(False, "--headless", help="Do not open the terminal UI (useful in CI)."),
    event: Optional[List[str]] = typer.Option(
        None,
        "--event",
        "-e",
        help="Scripted event for headless mode, e.g. 'click:root', 'input:opt', 'key:Enter'.",
    ),
) -> None:
    """Pick one or more options and print the chosen value(s) as JSON."""
    try:
        config = SelectConfig.load(options_file)
        overrides: dict[str, object] = {}
        if multiple is not None:
            overrides["multiple"] = multiple
        if create is not None:
            overrides["tag_creation"] = create
        if initial:
            overrides["initial_value"] = list(initial) if len(initial) > 1 else initial[0]
        if overrides:
            config = config.model_copy(update=overrides)

        selection = _resolve_prompt(headless, list(event or [])).prompt(config, title=title)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)
    except SelectError as exc:
        typer.echo(f"{exc.error_type}: {exc}", err=True)
        raise typer.Exit(2)

    if selection is None:
        typer.echo("Selection cancelled.", err=True)
        raise typer.Exit(1)

    values = [option.value for option in selection]
    if config.multiple:
        typer.echo(json.dumps(values))
    else:
        typer.echo(json.dumps(values[0] if values else None))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
