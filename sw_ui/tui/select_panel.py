"""Reusable select panel (display + search + option list) for prompt_toolkit UIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import TextArea
from rich.console import Console
from rich.text import Text

from sw_select.machine import SelectMachine
from sw_select.models import GroupIndex, Option, OptionGroup, TopIndex
from sw_select.state import SelectSnapshot

RowFragment: TypeAlias = tuple[str, str]


@dataclass(frozen=True)
class SelectPanelConfig:
    """Configuration for SelectPanel rendering."""

    focus_marker: str = "▸"
    selected_mark: str = "✓"
    pending_mark: str = "…"
    chip_style: str = "bold cyan"


class SelectPanel:
    """Renders machine snapshots; owns no state besides the search box widget.

    Callers wire keybindings to the machine and invalidate their Application
    when a new snapshot is emitted.
    """

    def __init__(
        self,
        machine: SelectMachine,
        *,
        search_prompt: str = "Search: ",
        search_style: str = "class:search",
        config: SelectPanelConfig | None = None,
    ) -> None:
        self._machine = machine
        self._config = config or SelectPanelConfig()
        self._console = Console(force_terminal=True)

        self.search = TextArea(height=1, prompt=search_prompt, style=search_style, multiline=False)
        self.display_control = FormattedTextControl(self._render_display)
        self.list_control = FormattedTextControl(self._render_list, focusable=True)

    @property
    def snapshot(self) -> SelectSnapshot:
        return self._machine.snapshot()

    def rows(self, snapshot: SelectSnapshot) -> list[RowFragment]:
        """Return one formatted row per group label and option."""
        if not snapshot.options:
            return [("class:no-data", f"  {snapshot.no_data_message}\n")]

        rows: list[RowFragment] = []
        for position, item in enumerate(snapshot.options):
            if isinstance(item, OptionGroup):
                rows.append(("class:group", f" {item.label}\n"))
                for offset, option in enumerate(item.options):
                    focused = snapshot.focused_address == GroupIndex(position, offset)
                    rows.append(self._option_row(snapshot, option, focused, indent="   "))
            else:
                focused = snapshot.focused_address == TopIndex(position)
                rows.append(self._option_row(snapshot, item, focused, indent=" "))
        return rows

    def _option_row(self, snapshot: SelectSnapshot, option: Option, focused: bool, *, indent: str) -> RowFragment:
        marker = self._config.focus_marker if focused else " "
        suffix = ""
        if snapshot.is_selected(option):
            suffix = f" {self._config.selected_mark}"
        elif snapshot.is_pending(option):
            suffix = f" {self._config.pending_mark}"

        style = ""
        if focused:
            style = "class:focused"
        elif snapshot.is_selected(option):
            style = "class:selected"
        elif snapshot.is_pending(option):
            style = "class:pending"
        return style, f"{indent}{marker} {option.name}{suffix}\n"

    def display(self, snapshot: SelectSnapshot) -> Text:
        """Rich text for the display area: chips in multi mode, else the value."""
        if not snapshot.selected_options:
            return Text(snapshot.placeholder, style="dim")
        if not snapshot.multiple:
            return Text(snapshot.display_text)

        text = Text()
        for option in snapshot.selected_options:
            if text:
                text.append(" ")
            text.append(f"[ {option.name} × ]", style=self._config.chip_style)
        return text

    def _render_list(self) -> list[RowFragment]:
        snapshot = self.snapshot
        if not snapshot.expanded:
            return []
        return self.rows(snapshot)

    def _render_display(self) -> ANSI:
        with self._console.capture() as cap:
            self._console.print(self.display(self.snapshot), end="")
        return ANSI(cap.get())
