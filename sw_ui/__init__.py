"""Rendering-layer boundary for the select widget.

Provides a headless event replayer and a prompt_toolkit terminal select so
UI code can evolve independently from the state machine in ``sw_select``.
"""

from sw_ui.headless import HeadlessSelect, apply_event, parse_event
from sw_ui.protocols import SelectPrompt

__all__ = ["HeadlessSelect", "SelectPrompt", "apply_event", "parse_event"]
