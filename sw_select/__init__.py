"""Option indexing and interaction state machine for select widgets."""

from sw_select.api import (
    Chip,
    ClickTarget,
    GroupIndex,
    Key,
    Option,
    OptionCollection,
    OptionGroup,
    SelectConfig,
    SelectMachine,
    SelectSnapshot,
    TopIndex,
)

__all__ = [
    "Chip",
    "ClickTarget",
    "GroupIndex",
    "Key",
    "Option",
    "OptionCollection",
    "OptionGroup",
    "SelectConfig",
    "SelectMachine",
    "SelectSnapshot",
    "TopIndex",
]
