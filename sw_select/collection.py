"""Indexed option collection backing the select dropdown.

Options live in one ordered top-level sequence where every entry is either a
plain :class:`Option` or an :class:`OptionGroup`. Options are addressed with
:class:`TopIndex` (top-level entry) or :class:`GroupIndex` (entry nested in a
group), so navigation keeps group boundaries without flattening the list.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping, Sequence

from sw_common.errors import AddressError
from sw_select.models import (
    GroupIndex,
    Option,
    OptionGroup,
    OptionIndex,
    OptionOrGroup,
    TopIndex,
    coerce_option_or_group,
)
from sw_select.text import create_option_prompt, matches, slugify

logger = logging.getLogger(__name__)


class OptionCollection:
    """Ordered option/group store with composite addressing.

    The constructor copies the supplied options and stamps every group with
    its top-level position and every nested option with its group position.
    The only mutation afterwards is :meth:`create_option` / :meth:`add_option`.

    Duplicate option values are not rejected; lookups return the first match.
    """

    def __init__(
        self,
        options: Iterable[OptionOrGroup | Mapping[str, Any]] = (),
        *,
        creation_enabled: bool = False,
    ) -> None:
        self._items: list[OptionOrGroup] = self._index(options)
        self._creation_enabled = creation_enabled

    @classmethod
    def view_of(
        cls, items: Sequence[OptionOrGroup], *, creation_enabled: bool = False
    ) -> "OptionCollection":
        """Wrap an already indexed sequence (e.g. a filter result) without re-indexing."""
        view = cls(creation_enabled=creation_enabled)
        view._items = list(items)
        return view

    @staticmethod
    def _index(options: Iterable[OptionOrGroup | Mapping[str, Any]]) -> list[OptionOrGroup]:
        items: list[OptionOrGroup] = []
        for position, raw in enumerate(options):
            item = coerce_option_or_group(raw)
            if isinstance(item, OptionGroup):
                item.position = position
                for option in item.options:
                    option.group_index = position
            else:
                item.group_index = None
            items.append(item)
        return items

    @property
    def items(self) -> tuple[OptionOrGroup, ...]:
        return tuple(self._items)

    @property
    def creation_enabled(self) -> bool:
        return self._creation_enabled

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[OptionOrGroup]:
        return iter(self._items)

    def empty(self) -> bool:
        return not self._items

    def addresses(self) -> Iterator[tuple[OptionIndex, Option]]:
        """Yield every option with its address, in display order."""
        for position, item in enumerate(self._items):
            if isinstance(item, OptionGroup):
                for offset, option in enumerate(item.options):
                    yield GroupIndex(position, offset), option
            else:
                yield TopIndex(position), item

    # --- addressing -----------------------------------------------------

    def first_index(self) -> OptionIndex | None:
        return self._enter_forward(0)

    def last_index(self) -> OptionIndex | None:
        return self._enter_backward(len(self._items) - 1)

    def get(self, address: OptionIndex) -> Option:
        """Resolve ``address`` to its option.

        Raises:
            AddressError: when the address is malformed or out of range.
        """
        if isinstance(address, TopIndex):
            item = self._item_at(address.position)
            if isinstance(item, OptionGroup):
                raise AddressError(
                    f"Top-level entry {address.position} is a group, not an option",
                    context={"address": address},
                )
            return item
        if isinstance(address, GroupIndex):
            group = self._group_at(address.group)
            if not 0 <= address.option < len(group.options):
                raise AddressError(
                    f"Group {address.group} has no option {address.option}",
                    context={"address": address, "size": len(group.options)},
                )
            return group.options[address.option]
        raise AddressError(
            f"Malformed option address: {address!r}",
            context={"address": address},
        )

    def find_option_index(self, option: Option) -> OptionIndex | None:
        """Return the address of the first option sharing ``option.value``.

        A miss is not an error: the last address of the collection is
        returned so callers clamp to the end. ``None`` only for an empty
        collection.
        """
        for address, candidate in self.addresses():
            if candidate.value == option.value:
                return address
        return self.last_index()

    def next_index(self, address: OptionIndex | None) -> OptionIndex | None:
        if address is None:
            return self.first_index()
        self.get(address)
        if isinstance(address, GroupIndex):
            group = self._group_at(address.group)
            if address.option + 1 < len(group.options):
                return GroupIndex(address.group, address.option + 1)
            return self._enter_forward(address.group + 1) or address
        return self._enter_forward(address.position + 1) or address

    def previous_index(self, address: OptionIndex | None) -> OptionIndex | None:
        if address is None:
            return self.first_index()
        self.get(address)
        if isinstance(address, GroupIndex):
            if address.option > 0:
                return GroupIndex(address.group, address.option - 1)
            return self._enter_backward(address.group - 1) or address
        return self._enter_backward(address.position - 1) or address

    def _enter_forward(self, start: int) -> OptionIndex | None:
        # Empty groups hold no address and are stepped over.
        for position in range(max(start, 0), len(self._items)):
            item = self._items[position]
            if not isinstance(item, OptionGroup):
                return TopIndex(position)
            if item.options:
                return GroupIndex(position, 0)
        return None

    def _enter_backward(self, start: int) -> OptionIndex | None:
        for position in range(min(start, len(self._items) - 1), -1, -1):
            item = self._items[position]
            if not isinstance(item, OptionGroup):
                return TopIndex(position)
            if item.options:
                return GroupIndex(position, len(item.options) - 1)
        return None

    def _item_at(self, position: int) -> OptionOrGroup:
        if not 0 <= position < len(self._items):
            raise AddressError(
                f"Position {position} is outside the collection",
                context={"position": position, "size": len(self._items)},
            )
        return self._items[position]

    def _group_at(self, position: int) -> OptionGroup:
        item = self._item_at(position)
        if not isinstance(item, OptionGroup):
            raise AddressError(
                f"Top-level entry {position} is not a group",
                context={"position": position},
            )
        return item

    # --- queries --------------------------------------------------------

    def filter(self, text: str | None = None) -> list[OptionOrGroup]:
        """Return the entries whose option names contain ``text``.

        Groups are rebuilt with their surviving options and keep their
        original position. With creation enabled, groups without survivors
        carry a single creation prompt, and a completely empty result becomes
        one top-level creation prompt. The stored entries are never modified.
        """
        if not text:
            return list(self._items)

        filtered: list[OptionOrGroup] = []
        for item in self._items:
            if isinstance(item, OptionGroup):
                survivors = [option for option in item.options if matches(option.name, text)]
                if not survivors and self._creation_enabled:
                    survivors = [self._creation_prompt(text, item.position)]
                if survivors:
                    filtered.append(
                        OptionGroup(label=item.label, options=survivors, position=item.position)
                    )
            elif matches(item.name, text):
                filtered.append(item)

        if not filtered and self._creation_enabled:
            filtered.append(self._creation_prompt(text, None))
        return filtered

    def view(self, text: str | None = None) -> "OptionCollection":
        """Return a navigable collection over :meth:`filter` results."""
        return OptionCollection.view_of(self.filter(text), creation_enabled=self._creation_enabled)

    @staticmethod
    def _creation_prompt(text: str, group_index: int | None) -> Option:
        return Option(name=create_option_prompt(text), value=slugify(text), group_index=group_index)

    def find_options_with_value(self, value: str | Sequence[str]) -> Option | list[Option] | None:
        """Look options up by value.

        A single value returns the first match or ``None``. A sequence of
        values returns every matching option in collection order.
        """
        if isinstance(value, str):
            for _, option in self.addresses():
                if option.value == value:
                    return option
            return None

        wanted = set(value)
        return [option for _, option in self.addresses() if option.value in wanted]

    # --- creation -------------------------------------------------------

    def create_option(
        self, name: str, group_address: int | None = None
    ) -> tuple[Option, OptionIndex, OptionGroup | None]:
        """Append a new option named ``name`` whose value is its slug."""
        return self.add_option(Option(name=name, value=slugify(name)), group_address)

    def add_option(
        self, option: Option, group_address: int | None = None
    ) -> tuple[Option, OptionIndex, OptionGroup | None]:
        """Append ``option`` to the group at ``group_address`` or to the top level.

        Returns the stored option, its address after the append and the
        owning group (``None`` for top-level options).
        """
        if group_address is None:
            stored = replace(option, group_index=None)
            self._items.append(stored)
            address: OptionIndex = TopIndex(len(self._items) - 1)
            logger.debug("Created option %s at %s", stored.value, address)
            return stored, address, None

        group = self._group_at(group_address)
        stored = replace(option, group_index=group_address)
        group.options.append(stored)
        address = GroupIndex(group_address, len(group.options) - 1)
        logger.debug("Created option %s in group %s at %s", stored.value, group.label, address)
        return stored, address, group
