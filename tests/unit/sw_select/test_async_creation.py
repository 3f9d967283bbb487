"""Tests for asynchronous option creation through the state machine."""

import asyncio

import pytest

from sw_common.errors import CreationError
from sw_select.config import SelectConfig
from sw_select.machine import SelectMachine
from sw_select.models import Option
from sw_select.state import Key


pytestmark = pytest.mark.unit_select


class RecordingCreator:
    """Async creator whose results are released by the test."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: set[str] = set()
        self.cancelled: set[str] = set()

    async def __call__(self, name: str) -> Option:
        self.calls.append(name)
        gate = self.gates.setdefault(name, asyncio.Event())
        await gate.wait()
        if name in self.cancelled:
            raise asyncio.CancelledError()
        if name in self.failures:
            raise RuntimeError(f"backend refused {name}")
        return Option(name=name, value=f"srv-{name.lower()}")

    def release(self, name: str) -> None:
        self.gates.setdefault(name, asyncio.Event()).set()


def _machine(creator, flat_options, created, errors, **kwargs) -> SelectMachine:
    return SelectMachine(
        SelectConfig(options=flat_options, tag_creation=creator, expanded_initially=True, **kwargs),
        on_option_created=lambda option, group: created.append((option, group)),
        on_error=errors.append,
    )


def test_async_creation_selects_result(flat_options) -> None:
    created, errors = [], []

    async def scenario() -> SelectMachine:
        creator = RecordingCreator()
        machine = _machine(creator, flat_options, created, errors)
        machine.input_text("Zed")
        machine.key(Key.ENTER)

        await asyncio.sleep(0)
        assert machine.snapshot().pending_prompts == frozenset({"Create Zed"})
        assert machine.snapshot().is_pending(machine.view().get(machine.view().first_index()))

        creator.release("Zed")
        await machine.drain()
        return machine

    machine = asyncio.run(scenario())

    assert created == [(Option(name="Zed", value="srv-zed"), None)]
    assert machine.state.selection == Option(name="Zed", value="srv-zed")
    assert machine.state.pending_creations == {}
    assert machine.state.expanded is False
    assert errors == []


def test_repeated_request_for_same_prompt_is_suppressed(flat_options) -> None:
    created, errors = [], []
    creator = RecordingCreator()

    async def scenario() -> None:
        machine = _machine(creator, flat_options, created, errors, multiple=True)
        machine.input_text("Zed")
        machine.key(Key.ENTER)
        machine.key(Key.ENTER)
        creator.release("Zed")
        await machine.drain()

    asyncio.run(scenario())

    assert creator.calls == ["Zed"]
    assert len(created) == 1


def test_result_after_collapse_is_dropped(flat_options) -> None:
    created, errors = [], []

    async def scenario() -> SelectMachine:
        creator = RecordingCreator()
        machine = _machine(creator, flat_options, created, errors)
        machine.input_text("Zed")
        machine.key(Key.ENTER)
        machine.key(Key.ESCAPE)
        assert machine.state.expanded is False

        creator.release("Zed")
        await machine.drain()
        return machine

    machine = asyncio.run(scenario())

    assert created == []
    assert machine.state.selection is None
    assert len(machine.collection) == 3


def test_result_after_search_change_is_dropped(flat_options) -> None:
    created, errors = [], []

    async def scenario() -> SelectMachine:
        creator = RecordingCreator()
        machine = _machine(creator, flat_options, created, errors)
        machine.input_text("Zed")
        machine.key(Key.ENTER)
        machine.input_text("Zeds")
        assert machine.snapshot().pending_prompts == frozenset()

        creator.release("Zed")
        await machine.drain()
        return machine

    machine = asyncio.run(scenario())

    assert created == []
    assert machine.state.expanded is True
    assert machine.state.search_text == "Zeds"


def test_rejected_creation_reports_error_and_clears_pending(flat_options) -> None:
    created, errors = [], []

    async def scenario() -> SelectMachine:
        creator = RecordingCreator()
        creator.failures.add("Zed")
        machine = _machine(creator, flat_options, created, errors)
        machine.input_text("Zed")
        machine.key(Key.ENTER)
        creator.release("Zed")
        await machine.drain()
        return machine

    machine = asyncio.run(scenario())

    assert created == []
    assert len(errors) == 1
    assert isinstance(errors[0], CreationError)
    assert isinstance(errors[0].__cause__, RuntimeError)
    assert errors[0].context == {"name": "Zed", "group": None}
    assert machine.state.pending_creations == {}
    assert machine.state.search_text == "Zed"
    assert machine.state.expanded is True
    assert machine.state.selection is None


def test_async_creator_without_running_loop_reports_error(flat_options) -> None:
    created, errors = [], []
    machine = _machine(RecordingCreator(), flat_options, created, errors)
    machine.input_text("Zed")

    machine.key(Key.ENTER)

    assert len(errors) == 1
    assert machine.state.pending_creations == {}
    assert created == []


def test_cancelled_creation_is_reported_and_can_be_retried(flat_options) -> None:
    created, errors = [], []
    creator = RecordingCreator()
    creator.cancelled.add("Zed")

    async def scenario() -> SelectMachine:
        machine = _machine(creator, flat_options, created, errors)
        machine.input_text("Zed")
        creator.release("Zed")

        machine.key(Key.ENTER)
        await machine.drain()
        assert machine.state.pending_creations == {}

        machine.key(Key.ENTER)
        await machine.drain()
        return machine

    machine = asyncio.run(scenario())

    assert creator.calls == ["Zed", "Zed"]
    assert len(errors) == 2
    assert all(isinstance(error, CreationError) for error in errors)
    assert isinstance(errors[0].__cause__, asyncio.CancelledError)
    assert machine.state.pending_creations == {}
    assert machine.state.expanded is True
    assert created == []
