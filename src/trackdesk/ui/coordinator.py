"""Routes buffers into the three fixed panes."""

from __future__ import annotations

from typing import Any

from trackdesk.logging import get_logger
from trackdesk.ui.panes import Buffer, Pane
from trackdesk.ui.protocol import WindowHost

log = get_logger("ui")

RESULT_BUFFER = "*result*"


class UICoordinator:
    """Owns one window per Pane for the lifetime of a coding session.

    Windows are rebound only by ``layout()``. Until a layout exists, or once
    a recorded window has gone away, buffers go to the host's default place.
    """

    def __init__(self, host: WindowHost) -> None:
        self._host = host
        self._windows: dict[Pane, Any] = {}

    @property
    def host(self) -> WindowHost:
        return self._host

    @property
    def has_layout(self) -> bool:
        return bool(self._windows)

    def window_for(self, pane: Pane) -> Any | None:
        window = self._windows.get(pane)
        if window is not None and self._host.is_live(window):
            return window
        return None

    def layout(self) -> None:
        """Reset to code-right, description-top-left, result-bottom-left."""
        description, result, code = self._host.reset_layout()
        self._windows = {
            Pane.DESCRIPTION: description,
            Pane.RESULT: result,
            Pane.CODE: code,
        }
        log.debug("Layout established")

    def show_in_pane(self, pane: Pane, buffer: Buffer) -> None:
        """Show ``buffer`` in the window recorded for ``pane``."""
        window = self.window_for(pane)
        if window is None:
            log.debug("No live window for %s pane, using default placement", pane.value)
            self._host.display_default(buffer)
            return
        self._host.display(window, buffer)

    def show_description(self, buffer: Buffer) -> None:
        buffer.read_only = True
        self.show_in_pane(Pane.DESCRIPTION, buffer)

    def show_result(self, text: str, title: str = RESULT_BUFFER) -> None:
        """Replace the result pane's contents with ``text``."""
        self.show_in_pane(Pane.RESULT, Buffer(name=title, text=text, read_only=True))

    def show_code(self, buffer: Buffer) -> None:
        buffer.read_only = False
        self.show_in_pane(Pane.CODE, buffer)

    def message(self, text: str, level: str = "info") -> None:
        self._host.message(text, level)
