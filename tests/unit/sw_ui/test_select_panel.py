"""Tests for the prompt_toolkit select panel and application wiring."""

import pytest

from sw_select.config import SelectConfig
from sw_select.machine import SelectMachine
from sw_select.models import GroupIndex
from sw_select.state import Key
from sw_ui.tui.select_app import SelectApp
from sw_ui.tui.select_panel import SelectPanel


pytestmark = pytest.mark.unit_ui


def _texts(rows) -> list[str]:
    return [text.rstrip("\n") for _, text in rows]


def test_rows_render_groups_focus_and_selection(grouped_options) -> None:
    machine = SelectMachine(
        SelectConfig(options=grouped_options, multiple=True, initial_value=["option-2"], expanded_initially=True)
    )
    machine.key(Key.ARROW_DOWN)
    machine.key(Key.ARROW_DOWN)
    panel = SelectPanel(machine)

    rows = panel.rows(machine.snapshot())
    texts = _texts(rows)

    assert texts[0] == "   Option 1"
    assert texts[1] == "   Option 2 ✓"
    assert texts[2] == " Group 1"
    assert texts[3] == "   ▸ Option 3"
    assert rows[3][0] == "class:focused"
    assert rows[1][0] == "class:selected"
    assert rows[2][0] == "class:group"
    assert len(rows) == 13


def test_rows_show_no_data_message(flat_options) -> None:
    machine = SelectMachine(SelectConfig(options=flat_options, no_data_message="Nothing here"))
    machine.input_text("zzz")

    assert _texts(SelectPanel(machine).rows(machine.snapshot())) == ["  Nothing here"]


def test_rows_mark_pending_prompt(flat_options) -> None:
    machine = SelectMachine(SelectConfig(options=flat_options, tag_creation=True, expanded_initially=True))
    machine.input_text("Zed")
    machine.state.pending_creations["Zed"] = machine.state.generation

    rows = SelectPanel(machine).rows(machine.snapshot())

    assert _texts(rows) == [" ▸ Create Zed …"]


def test_display_shows_chips_in_multiple_mode(flat_options) -> None:
    machine = SelectMachine(
        SelectConfig(options=flat_options, multiple=True, initial_value=["option-1", "option-3"])
    )

    display = SelectPanel(machine).display(machine.snapshot())

    assert display.plain == "[ Option 1 × ] [ Option 3 × ]"


def test_display_shows_placeholder_or_value(flat_options) -> None:
    empty = SelectMachine(SelectConfig(options=flat_options, placeholder="Choose"))
    chosen = SelectMachine(SelectConfig(options=flat_options, initial_value="option-2"))

    assert SelectPanel(empty).display(empty.snapshot()).plain == "Choose"
    assert SelectPanel(chosen).display(chosen.snapshot()).plain == "Option 2"


def test_search_box_drives_machine_and_is_cleared_on_selection(grouped_options) -> None:
    machine = SelectMachine(SelectConfig(options=grouped_options, multiple=True))
    app = SelectApp(machine, title="Test")

    app.search.text = "Option 8"
    assert machine.state.expanded is True
    assert machine.state.search_text == "Option 8"
    assert machine.state.focused_address == GroupIndex(0, 0)

    option = app._focused_option()
    assert option is not None and option.value == "option-8"
    machine.click_option(option)

    assert app.search.text == ""
    assert machine.state.search_text == ""
    assert machine.state.focused_address == GroupIndex(4, 1)
