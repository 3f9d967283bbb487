from __future__ import annotations

from typing import Protocol

from sw_select.config import SelectConfig
from sw_select.models import Option


class SelectPrompt(Protocol):
    def prompt(
        self,
        config: SelectConfig,
        *,
        title: str,
    ) -> tuple[Option, ...] | None: ...
