"""Chip (tag) widget state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from sw_common.errors import ConfigurationError


@dataclass
class Chip:
    """A label that is either selectable (toggles) or removable, never both."""

    label: str
    selectable: bool = False
    removable: bool = False
    on_remove: Optional[Callable[[], None]] = None
    before_remove: Optional[Callable[[], None]] = None
    selected: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.selectable and self.removable:
            raise ConfigurationError(
                f"Selectable: {self.selectable}, removable: {self.removable}. "
                "Chip can be either selectable or removable, not both",
                context={"label": self.label},
            )

    @property
    def leading_icon(self) -> str | None:
        return "selected" if self.selected else None

    @property
    def trailing_icon(self) -> str | None:
        return "remove" if self.removable else None

    def toggle(self) -> bool:
        if self.selectable:
            self.selected = not self.selected
        return self.selected

    def remove(self) -> None:
        if not self.removable:
            return
        if self.before_remove is not None:
            self.before_remove()
        if self.on_remove is not None:
            self.on_remove()
