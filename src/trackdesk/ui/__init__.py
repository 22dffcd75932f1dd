"""Presentation: the three-pane coordinator and its ports.

Terminal adapters live in ``trackdesk.ui.console`` and are imported
separately so the core does not require a terminal.
"""

from trackdesk.ui.coordinator import UICoordinator
from trackdesk.ui.panes import Buffer, Pane
from trackdesk.ui.protocol import Choice, Prompter, StatusSink, WindowHost

__all__ = [
    "Buffer",
    "Choice",
    "Pane",
    "Prompter",
    "StatusSink",
    "UICoordinator",
    "WindowHost",
]
