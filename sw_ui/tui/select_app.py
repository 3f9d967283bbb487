from __future__ import annotations

import sys
from typing import Any

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from sw_select.config import SelectConfig
from sw_select.machine import SelectMachine
from sw_select.models import Option
from sw_select.state import ClickTarget, Key, SelectSnapshot
from sw_ui.protocols import SelectPrompt
from sw_ui.tui.select_panel import SelectPanel


class SelectApp:
    """Full-screen terminal select bound to a SelectMachine."""

    def __init__(self, machine: SelectMachine, *, title: str) -> None:
        self.machine = machine
        self.title = title
        self._syncing = False

        self._panel = SelectPanel(machine)
        self.search = self._panel.search
        self.kb = self._keybindings()

        root_container = Frame(
            HSplit(
                [
                    Window(self._panel.display_control, height=1),
                    Window(height=1, char="-", style="class:separator"),
                    self.search,
                    Window(height=1, char="-", style="class:separator"),
                    Window(self._panel.list_control),
                ]
            ),
            title=title,
        )

        self.app: Application = Application(
            layout=Layout(root_container, focused_element=self.search),
            key_bindings=self.kb,
            style=Style.from_dict(
                {
                    "focused": "bg:#0000aa fg:white bold",
                    "selected": "fg:#00ff00 bold",
                    "pending": "fg:#888888 italic",
                    "group": "bold underline",
                    "no-data": "italic",
                    "separator": "fg:#0000aa",
                    "frame.border": "fg:#0000aa",
                    "frame.label": "fg:#0000aa bold",
                    "search": "bg:#eeeeee fg:#000000",
                }
            ),
            full_screen=True,
        )

        self.search.text = machine.state.search_text
        self.search.buffer.on_text_changed += lambda _: self._on_query_changed()
        machine.subscribe(self._on_snapshot)

    def _on_query_changed(self) -> None:
        if self._syncing:
            return
        self._syncing = True
        try:
            if not self.machine.state.expanded:
                self.machine.click(ClickTarget.DROPDOWN_BUTTON)
            self.machine.input_text(self.search.text)
        finally:
            self._syncing = False

    def _on_snapshot(self, snapshot: SelectSnapshot) -> None:
        # Selections clear the search text; mirror it without re-filtering.
        if not self._syncing and self.search.text != snapshot.search_text:
            self._syncing = True
            try:
                self.search.text = snapshot.search_text
            finally:
                self._syncing = False
        self.app.invalidate()

    def _focused_option(self) -> Option | None:
        view = self.machine.view()
        address = self.machine.state.focused_address
        if address is None or view.empty():
            return None
        for candidate, option in view.addresses():
            if candidate == address:
                return option
        return None

    def _exit(self, app: Application, result: Any) -> None:
        """Exit the prompt safely, ignoring duplicate-exit errors."""
        try:
            app.exit(result=result)
        except Exception as exc:  # pragma: no cover
            if "Return value already set" in str(exc):
                return
            raise

    def _result(self) -> tuple[Option, ...]:
        return self.machine.snapshot().selected_options

    def _keybindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("down")
        def _(e: Any) -> None:
            if not self.machine.state.expanded:
                self.machine.click(ClickTarget.DROPDOWN_BUTTON)
            self.machine.key(Key.ARROW_DOWN)

        @kb.add("up")
        def _(e: Any) -> None:
            self.machine.key(Key.ARROW_UP)

        @kb.add("enter")
        def _(e: Any) -> None:
            self.machine.key(Key.ENTER)
            if not self.machine.multiple and not self.machine.state.expanded:
                self._exit(e.app, self._result())

        @kb.add("space")
        def _(e: Any) -> None:
            option = self._focused_option()
            if self.machine.multiple and option is not None and not self.search.text:
                self.machine.click_option(option)
                return
            self.search.buffer.insert_text(" ")

        @kb.add("c-o")
        def _(e: Any) -> None:
            self.machine.click(ClickTarget.DROPDOWN_BUTTON)

        @kb.add("c-x")
        def _(e: Any) -> None:
            self.machine.clear_selection()

        @kb.add("c-d")
        def _(e: Any) -> None:
            selected = self.machine.snapshot().selected_options
            if selected:
                self.machine.remove_chip(selected[-1])

        @kb.add("c-s")
        def _(e: Any) -> None:
            self._exit(e.app, self._result())

        @kb.add("escape")
        def _(e: Any) -> None:
            if self.machine.state.expanded:
                self.machine.key(Key.ESCAPE)
                return
            self._exit(e.app, None)

        @kb.add("c-c")
        def _(e: Any) -> None:
            e.app.exit(result=None)

        return kb

    def run(self) -> tuple[Option, ...] | None:
        return self.app.run()


class TerminalSelect(SelectPrompt):
    def prompt(self, config: SelectConfig, *, title: str = "Select") -> tuple[Option, ...] | None:
        if not sys.stdin.isatty() or not sys.stdout.isatty():
            return None
        machine = SelectMachine(config.model_copy(update={"expanded_initially": True}))
        return SelectApp(machine, title=title).run()
