"""Widget configuration for the select state machine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sw_common.errors import ConfigurationError
from sw_select.models import Option, OptionOrGroup, coerce_option_or_group

OptionCreator = Callable[[str], Union[Option, Awaitable[Option]]]


class SelectConfig(BaseModel):
    """Configuration set handed to the select widget by its host."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    options: List[Any] = Field(default_factory=list, description="Options and groups, as models or mappings")
    name: Optional[str] = Field(default=None, description="Form field name for the hidden value")
    multiple: bool = Field(default=False, description="Allow selecting several options")
    tag_creation: Union[bool, Callable[..., Any]] = Field(
        default=False,
        description="Offer a creation prompt; a callable creates the option (sync or async)",
    )
    initial_value: Optional[Union[str, List[str]]] = Field(default=None, description="Initially selected value(s)")
    placeholder: str = Field(default="", description="Display text when nothing is selected")
    no_data_message: str = Field(default="No data available", description="Shown when no option passes the filter")
    expanded_initially: bool = Field(default=False, description="Start with the dropdown open")

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, value: Any) -> list[OptionOrGroup]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("options must be a list")
        return [coerce_option_or_group(item) for item in value]

    @property
    def creation_enabled(self) -> bool:
        return bool(self.tag_creation)

    @property
    def creator(self) -> OptionCreator | None:
        if callable(self.tag_creation):
            return self.tag_creation
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectConfig":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid select configuration",
                context={"errors": [err["msg"] for err in exc.errors()]},
                cause=exc,
            ) from exc

    @classmethod
    def load(cls, path: Path) -> "SelectConfig":
        """Load a configuration from a YAML (or JSON) file.

        The file may hold either a full configuration mapping or just a list
        of options.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        data = yaml.safe_load(path.read_text()) or {}
        if isinstance(data, list):
            data = {"options": data}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Select configuration must be a mapping or a list of options",
                context={"path": path},
            )
        return cls.from_dict(data)
