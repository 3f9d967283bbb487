"""State containers for the select state machine."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from sw_select.models import Option, OptionIndex, OptionOrGroup

Selection = Union[None, Option, list[Option]]


class ClickTarget(str, Enum):
    """Element a click originated from."""

    ROOT = "root"
    DISPLAY = "display"
    VALUE = "value"
    DROPDOWN_BUTTON = "dropdown_button"
    SEARCHBOX = "searchbox"
    OPTION = "option"
    CHIP = "chip"
    CHIP_REMOVE = "chip_remove"
    CLEAR_BUTTON = "clear_button"

    @property
    def is_trigger(self) -> bool:
        return self in _TRIGGER_SURFACES


_TRIGGER_SURFACES = {
    ClickTarget.ROOT,
    ClickTarget.DISPLAY,
    ClickTarget.VALUE,
    ClickTarget.DROPDOWN_BUTTON,
}


class Key(str, Enum):
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ENTER = "Enter"
    ESCAPE = "Escape"


@dataclass(slots=True)
class SelectState:
    """Mutable interaction state owned by one machine."""

    search_text: str = ""
    expanded: bool = False
    focused_address: Optional[OptionIndex] = None
    selection: Selection = None
    pending_blur_suppressed: bool = False
    search_focused: bool = False
    # creation prompt text -> generation the creation started in
    pending_creations: dict[str, int] = field(default_factory=dict)
    generation: int = 0


@dataclass(frozen=True)
class SelectSnapshot:
    """Immutable view handed to renderers after every transition."""

    options: tuple[OptionOrGroup, ...]
    selection: Union[None, Option, tuple[Option, ...]]
    focused_address: Optional[OptionIndex]
    expanded: bool
    search_text: str
    multiple: bool = False
    search_focused: bool = False
    pending_prompts: frozenset[str] = frozenset()
    placeholder: str = ""
    no_data_message: str = "No data available"
    name: Optional[str] = None

    @property
    def selected_options(self) -> tuple[Option, ...]:
        if self.selection is None:
            return ()
        if isinstance(self.selection, Option):
            return (self.selection,)
        return self.selection

    @property
    def selected_values(self) -> frozenset[str]:
        return frozenset(option.value for option in self.selected_options)

    def is_selected(self, option: Option) -> bool:
        return option.value in self.selected_values

    def is_pending(self, option: Option) -> bool:
        return option.name in self.pending_prompts

    @property
    def display_text(self) -> str:
        """Text for the collapsed display area (single mode) or the placeholder."""
        if self.selection is None:
            return self.placeholder
        return ", ".join(option.name for option in self.selected_options)

    @property
    def hidden_value(self) -> str:
        """Form value: a JSON array of values in multi mode, else the single value."""
        if self.multiple:
            if self.selection is None:
                return ""
            return json.dumps([option.value for option in self.selected_options])
        if isinstance(self.selection, Option):
            return self.selection.value
        return ""
