"""Presentation ports the orchestration core depends on.

The core never talks to a concrete windowing system; it routes buffers to
panes through these protocols.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from trackdesk.ui.panes import Buffer


class StatusSink(Protocol):
    """Receives user-facing status messages."""

    def message(self, text: str, level: str = "info") -> None:
        """Show a message; level is "info" or "error"."""
        ...


class WindowHost(StatusSink, Protocol):
    """A windowing system that can hold the three-pane layout.

    Window handles are opaque to the core.
    """

    def reset_layout(self) -> tuple[Any, Any, Any]:
        """Reset the frame and return (description, result, code) windows."""
        ...

    def display(self, window: Any, buffer: Buffer) -> None:
        """Show ``buffer`` in ``window``, reusing the window."""
        ...

    def is_live(self, window: Any) -> bool:
        """True if ``window`` still exists."""
        ...

    def display_default(self, buffer: Buffer) -> None:
        """Show ``buffer`` wherever the host puts buffers by default."""
        ...


@dataclass(frozen=True, slots=True)
class Choice:
    """One selectable option with an optional annotation."""

    value: str
    label: str
    annotation: str = ""


class Prompter(Protocol):
    """Asks the user to pick one option."""

    async def choose(self, prompt: str, choices: Sequence[Choice]) -> str | None:
        """Return the chosen value, or None if the user cancelled."""
        ...
