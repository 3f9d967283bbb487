from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, TypeAlias, Union

from sw_common.errors import ConfigurationError
from sw_select.text import slugify


@dataclass
class Option:
    name: str
    value: str
    group_index: int | None = None  # position of the owning group, if any


@dataclass
class OptionGroup:
    label: str
    options: list[Option] = field(default_factory=list)
    position: int | None = None  # own index within the top-level sequence


OptionOrGroup: TypeAlias = Union[Option, OptionGroup]


@dataclass(frozen=True)
class TopIndex:
    """Address of an option stored directly in the top-level sequence."""

    position: int


@dataclass(frozen=True)
class GroupIndex:
    """Address of an option nested in the group at ``group``."""

    group: int
    option: int


OptionIndex: TypeAlias = Union[TopIndex, GroupIndex]


def is_group(item: OptionOrGroup) -> bool:
    return isinstance(item, OptionGroup)


def coerce_option(raw: Option | Mapping[str, Any]) -> Option:
    """Build an Option from a model object or a plain mapping."""
    if isinstance(raw, Option):
        return Option(name=raw.name, value=raw.value, group_index=raw.group_index)
    if not isinstance(raw, Mapping) or "name" not in raw:
        raise ConfigurationError(
            "Option entries need at least a 'name'",
            context={"entry": raw},
        )
    name = str(raw["name"])
    value = raw.get("value")
    return Option(name=name, value=str(value) if value is not None else slugify(name))


def coerce_option_or_group(raw: OptionOrGroup | Mapping[str, Any]) -> OptionOrGroup:
    """Build an Option or OptionGroup from a model object or a plain mapping.

    Mappings carrying ``label`` (or ``group``, the key used by older option
    sources) are groups and must list their ``options``; anything else is
    treated as a single option. Returned objects are always fresh copies.
    """
    if isinstance(raw, OptionGroup):
        return OptionGroup(
            label=raw.label,
            options=[coerce_option(option) for option in raw.options],
            position=raw.position,
        )
    if isinstance(raw, Mapping) and ("label" in raw or "group" in raw):
        label = raw.get("label", raw.get("group"))
        options = raw.get("options") or []
        if not isinstance(options, (list, tuple)):
            raise ConfigurationError(
                f"Group '{label}' options must be a list",
                context={"group": label},
            )
        return OptionGroup(label=str(label), options=[coerce_option(o) for o in options])
    return coerce_option(raw)
