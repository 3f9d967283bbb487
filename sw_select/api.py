"""Public API surface for sw_select."""

from sw_select.chip import Chip
from sw_select.collection import OptionCollection
from sw_select.config import OptionCreator, SelectConfig
from sw_select.machine import SelectMachine
from sw_select.models import (
    GroupIndex,
    Option,
    OptionGroup,
    OptionIndex,
    OptionOrGroup,
    TopIndex,
    is_group,
)
from sw_select.state import ClickTarget, Key, SelectSnapshot, SelectState
from sw_select.text import create_option_prompt, is_create_option_prompt, slugify

__all__ = [
    "Chip",
    "ClickTarget",
    "GroupIndex",
    "Key",
    "Option",
    "OptionCollection",
    "OptionCreator",
    "OptionGroup",
    "OptionIndex",
    "OptionOrGroup",
    "SelectConfig",
    "SelectMachine",
    "SelectSnapshot",
    "SelectState",
    "TopIndex",
    "create_option_prompt",
    "is_create_option_prompt",
    "is_group",
    "slugify",
]
