"""Selection and navigation state machine for the select widget.

The machine interprets raw UI events (clicks, keys, text input, hover,
pointer-down and blur), updates a single :class:`SelectState` and hands
renderers an immutable :class:`SelectSnapshot` after every transition.
Everything runs synchronously inside the event dispatch; the only suspension
point is an asynchronous option creator, which is scheduled on the running
asyncio loop and guarded by a generation token so that results arriving
after a collapse or a search change are dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from sw_common.errors import AddressError, CreationError, error_to_payload, wrap_error
from sw_select.collection import OptionCollection
from sw_select.config import SelectConfig
from sw_select.models import Option, OptionGroup, OptionIndex, coerce_option
from sw_select.state import ClickTarget, Key, Selection, SelectSnapshot, SelectState
from sw_select.text import create_option_prompt, is_create_option_prompt

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[SelectSnapshot], None]
OptionCreatedHandler = Callable[[Option, Optional[str]], None]
ErrorHandler = Callable[[CreationError], None]


class SelectMachine:
    """Drives one select widget instance.

    Args:
        config: widget configuration; its options are copied into a private
            :class:`OptionCollection`.
        on_option_created: called once per successful creation with the new
            option and the label of its group (``None`` at top level).
        on_error: receives :class:`CreationError` when a creator fails.
    """

    def __init__(
        self,
        config: SelectConfig,
        *,
        on_option_created: OptionCreatedHandler | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self._config = config
        self._collection = OptionCollection(config.options, creation_enabled=config.creation_enabled)
        self._on_option_created = on_option_created
        self._on_error = on_error
        self._listeners: list[SnapshotListener] = []
        self._inflight: set[asyncio.Future[Any]] = set()
        self.state = SelectState(
            expanded=config.expanded_initially,
            focused_address=self._collection.first_index(),
            selection=self._initial_selection(),
            search_focused=config.expanded_initially,
        )

    @property
    def collection(self) -> OptionCollection:
        return self._collection

    @property
    def config(self) -> SelectConfig:
        return self._config

    @property
    def multiple(self) -> bool:
        return self._config.multiple

    def _initial_selection(self) -> Selection:
        value = self._config.initial_value
        if not value:
            return None
        found = self._collection.find_options_with_value(value)
        if self.multiple:
            if isinstance(found, Option):
                return [found]
            return list(found) if found else None
        if isinstance(found, list):
            return found[0] if found else None
        return found

    # --- snapshots ------------------------------------------------------

    def view(self) -> OptionCollection:
        """The collection as currently filtered by the search text."""
        return self._collection.view(self.state.search_text)

    def snapshot(self) -> SelectSnapshot:
        selection = self.state.selection
        return SelectSnapshot(
            options=self.view().items,
            selection=tuple(selection) if isinstance(selection, list) else selection,
            focused_address=self.state.focused_address,
            expanded=self.state.expanded,
            search_text=self.state.search_text,
            multiple=self.multiple,
            search_focused=self.state.search_focused,
            pending_prompts=frozenset(create_option_prompt(text) for text in self.state.pending_creations),
            placeholder=self._config.placeholder,
            no_data_message=self._config.no_data_message,
            name=self._config.name,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener`` for snapshots; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # --- expansion ------------------------------------------------------

    def click(self, target: ClickTarget) -> None:
        """Handle a click; only the widget's own trigger surfaces toggle."""
        if not ClickTarget(target).is_trigger:
            return
        if self.state.expanded:
            self._collapse()
        else:
            self._expand()
        self._emit()

    def pointer_down(self) -> None:
        """Pointer pressed inside the widget: the next blur is not a focus loss."""
        self.state.pending_blur_suppressed = True

    def blur(self, *, inside: bool = False) -> None:
        """Handle focus loss; ``inside`` when focus moved to another widget element."""
        if self.state.pending_blur_suppressed:
            self.state.pending_blur_suppressed = False
            return
        if inside or not self.state.expanded:
            return
        self._collapse()
        self._emit()

    def _expand(self) -> None:
        self.state.expanded = True
        self.state.search_focused = True
        self.state.pending_blur_suppressed = True
        logger.debug("Dropdown expanded")

    def _collapse(self, *, clear_search: bool = False) -> None:
        self.state.expanded = False
        self.state.search_focused = False
        if clear_search and self.state.search_text:
            self.state.focused_address = self._unfiltered_focus()
            self.state.search_text = ""
        self._invalidate_pending()
        logger.debug("Dropdown collapsed")

    def _unfiltered_focus(self) -> OptionIndex | None:
        # Addresses are relative to the filtered view; map focus back by value.
        address = self.state.focused_address
        if address is None:
            return self._collection.first_index()
        try:
            option = self.view().get(address)
        except AddressError:
            return self._collection.first_index()
        if self._is_creation_prompt(option):
            return self._collection.first_index()
        return self._collection.find_option_index(option)

    def _invalidate_pending(self) -> None:
        if self.state.pending_creations:
            logger.debug("Discarding pending creations: %s", sorted(self.state.pending_creations))
        self.state.pending_creations.clear()
        self.state.generation += 1

    # --- keyboard, search, hover ---------------------------------------

    def key(self, key: Key) -> None:
        key = Key(key)
        if key is Key.ESCAPE:
            self._collapse(clear_search=True)
            self._emit()
            return
        if not self.state.expanded:
            return

        view = self.view()
        if key is Key.ARROW_DOWN:
            self.state.focused_address = view.next_index(self._focus_in(view))
        elif key is Key.ARROW_UP:
            self.state.focused_address = view.previous_index(self._focus_in(view))
        elif key is Key.ENTER:
            address = self._focus_in(view)
            if address is None:
                return
            self._accept(view.get(address), toggle=False)
            return
        self._emit()

    def _focus_in(self, view: OptionCollection) -> OptionIndex | None:
        # The focused address may predate the current filter.
        address = self.state.focused_address
        if address is None:
            return None
        try:
            view.get(address)
        except AddressError:
            return view.first_index()
        return address

    def input_text(self, text: str) -> None:
        """Search text changed: refilter and focus the first remaining option."""
        if text != self.state.search_text:
            self._invalidate_pending()
        self.state.search_text = text
        self.state.focused_address = self.view().first_index()
        self._emit()

    def hover(self, option: Option) -> None:
        """Move the visual focus to ``option`` without touching input focus."""
        self.state.focused_address = self.view().find_option_index(option)
        self._emit()

    # --- selection ------------------------------------------------------

    def click_option(self, option: Option) -> None:
        """Toggle ``option``, or create it when it is the creation prompt."""
        self._accept(option, toggle=True)

    def _accept(self, option: Option, *, toggle: bool) -> None:
        if self._is_creation_prompt(option):
            self._create(option)
            return
        if toggle and option.value in self._selected_values():
            self._unselect(option)
        else:
            self._select(option)
        self._emit()

    def _is_creation_prompt(self, option: Option) -> bool:
        return self._collection.creation_enabled and is_create_option_prompt(
            option.name, self.state.search_text
        )

    def _selected_values(self) -> set[str]:
        selection = self.state.selection
        if selection is None:
            return set()
        if isinstance(selection, Option):
            return {selection.value}
        return {option.value for option in selection}

    def _select(self, option: Option, address: OptionIndex | None = None) -> None:
        if self.multiple:
            current = list(self.state.selection or [])
            if option.value not in {selected.value for selected in current}:
                current.append(option)
            self.state.selection = current
        else:
            self.state.selection = option

        if self.state.search_text:
            self._invalidate_pending()
        self.state.search_text = ""
        self.state.focused_address = address or self._collection.find_option_index(option)
        if not self.multiple:
            self._collapse()
        logger.debug("Selected option %s", option.value)

    def _unselect(self, option: Option) -> None:
        if self.multiple:
            self._remove_value(option.value)
        else:
            self.state.selection = None
        logger.debug("Unselected option %s", option.value)

    def _remove_value(self, value: str) -> None:
        selection = self.state.selection
        if isinstance(selection, list):
            remaining = [option for option in selection if option.value != value]
            self.state.selection = remaining or None
        elif isinstance(selection, Option) and selection.value == value:
            self.state.selection = None

    def clear_selection(self) -> None:
        """Clear control: drop the whole selection, keep the dropdown as is."""
        self.state.selection = None
        self._emit()

    def remove_chip(self, option: Option) -> None:
        """Chip remove control: drop one option by value, keep the dropdown as is."""
        self._remove_value(option.value)
        self._emit()

    # --- creation -------------------------------------------------------

    def _create(self, prompt: Option) -> None:
        name = self.state.search_text
        group_address = prompt.group_index
        creator = self._config.creator

        if creator is None:
            self._created(*self._collection.create_option(name, group_address))
            return

        if name in self.state.pending_creations:
            logger.debug("Creation of %r already in flight", name)
            return

        try:
            result = creator(name)
        except Exception as exc:
            self._creation_failed(name, group_address, exc)
            return

        if inspect.isawaitable(result):
            self._start_async_creation(name, group_address, result)
            return
        self._add_created(name, group_address, result)

    def _add_created(self, name: str, group_address: int | None, result: Any) -> None:
        try:
            option = coerce_option(result)
        except Exception as exc:
            self._creation_failed(name, group_address, exc)
            return
        self._created(*self._collection.add_option(option, group_address))

    def _created(self, option: Option, address: OptionIndex, group: OptionGroup | None) -> None:
        self._select(option, address)
        self._emit()
        if self._on_option_created is not None:
            self._on_option_created(option, group.label if group is not None else None)

    def _start_async_creation(
        self, name: str, group_address: int | None, awaitable: Awaitable[Any]
    ) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._creation_failed(name, group_address, exc)
            return

        generation = self.state.generation
        self.state.pending_creations[name] = generation
        task = loop.create_task(self._await_creation(name, group_address, generation, awaitable))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        logger.debug("Creation of %r pending (generation %d)", name, generation)
        self._emit()

    async def _await_creation(
        self,
        name: str,
        group_address: int | None,
        generation: int,
        awaitable: Awaitable[Any],
    ) -> None:
        try:
            result = await awaitable
        except (asyncio.CancelledError, Exception) as exc:
            # A cancelled creator is a rejection like any other failure.
            if self._is_current(name, generation):
                del self.state.pending_creations[name]
                self._creation_failed(name, group_address, exc)
            else:
                logger.debug("Ignoring failure of stale creation %r: %s", name, exc)
            return

        if not self._is_current(name, generation):
            logger.debug("Dropping stale creation result for %r", name)
            return
        del self.state.pending_creations[name]
        self._add_created(name, group_address, result)

    def _is_current(self, name: str, generation: int) -> bool:
        return (
            self.state.generation == generation
            and self.state.pending_creations.get(name) == generation
        )

    def _creation_failed(self, name: str, group_address: int | None, exc: BaseException) -> None:
        error = wrap_error(
            CreationError,
            f"Creating option {name!r} failed: {str(exc) or exc.__class__.__name__}",
            context={"name": name, "group": group_address},
            cause=exc,
        )
        logger.warning("Option creation failed: %s", error_to_payload(error))
        self._emit()
        if self._on_error is not None:
            self._on_error(error)

    async def drain(self) -> None:
        """Wait until every in-flight asynchronous creation has settled."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)
