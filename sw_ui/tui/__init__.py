"""prompt_toolkit front-end for the select state machine."""

from sw_ui.tui.select_app import SelectApp, TerminalSelect
from sw_ui.tui.select_panel import SelectPanel, SelectPanelConfig

__all__ = ["SelectApp", "SelectPanel", "SelectPanelConfig", "TerminalSelect"]
