"""Scripted, terminal-free driver for the select state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from sw_common.errors import ConfigurationError, CreationError
from sw_select.config import SelectConfig
from sw_select.machine import SelectMachine
from sw_select.models import Option
from sw_select.state import ClickTarget, Key, SelectSnapshot
from sw_ui.protocols import SelectPrompt

EVENT_KINDS = (
    "click",
    "key",
    "input",
    "hover",
    "option",
    "pointer_down",
    "blur",
    "clear",
    "remove",
)


def parse_event(raw: str) -> tuple[str, str]:
    """Split ``kind[:argument]`` (e.g. ``key:ArrowDown``) into its parts."""
    kind, _, argument = raw.partition(":")
    kind = kind.strip().lower()
    if kind not in EVENT_KINDS:
        raise ConfigurationError(
            f"Unknown select event {kind!r}",
            context={"event": raw, "known": list(EVENT_KINDS)},
        )
    return kind, argument


def _find_option(machine: SelectMachine, value: str) -> Option:
    for _, option in machine.view().addresses():
        if option.value == value or option.name == value:
            return option
    for option in machine.snapshot().selected_options:
        if option.value == value:
            return option
    raise ConfigurationError(
        f"No visible option with value {value!r}",
        context={"value": value, "search": machine.state.search_text},
    )


def apply_event(machine: SelectMachine, kind: str, argument: str = "") -> None:
    """Feed one parsed event into ``machine``."""
    if kind == "click":
        machine.click(ClickTarget(argument or ClickTarget.ROOT.value))
    elif kind == "key":
        machine.key(Key(argument))
    elif kind == "input":
        machine.input_text(argument)
    elif kind == "hover":
        machine.hover(_find_option(machine, argument))
    elif kind == "option":
        machine.click_option(_find_option(machine, argument))
    elif kind == "pointer_down":
        machine.pointer_down()
    elif kind == "blur":
        machine.blur(inside=argument == "inside")
    elif kind == "clear":
        machine.clear_selection()
    elif kind == "remove":
        machine.remove_chip(_find_option(machine, argument))
    else:
        raise ConfigurationError(f"Unknown select event {kind!r}", context={"event": kind})


@dataclass
class HeadlessSelect(SelectPrompt):
    """Replays ``events`` through a fresh machine and returns the selection."""

    events: Sequence[str] = ()
    recorded_snapshots: list[SelectSnapshot] = field(default_factory=list)
    created: list[tuple[Option, str | None]] = field(default_factory=list)
    errors: list[CreationError] = field(default_factory=list)

    def prompt(self, config: SelectConfig, *, title: str = "") -> tuple[Option, ...] | None:
        machine = SelectMachine(
            config,
            on_option_created=lambda option, group: self.created.append((option, group)),
            on_error=self.errors.append,
        )
        machine.subscribe(self.recorded_snapshots.append)
        for raw in self.events:
            apply_event(machine, *parse_event(raw))
        return machine.snapshot().selected_options
