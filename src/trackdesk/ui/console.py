"""Terminal implementations of the presentation ports.

RichWindowHost renders each pane as a titled rich panel; ConsolePrompter
lists options in a table and reads a choice with prompt_toolkit completion.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from trackdesk.ui.panes import Buffer, Pane
from trackdesk.ui.protocol import Choice

_PANE_STYLE = {
    Pane.DESCRIPTION: "cyan",
    Pane.RESULT: "magenta",
    Pane.CODE: "green",
}


@dataclass(frozen=True, slots=True)
class TerminalWindow:
    """A named output region; valid until the next layout reset."""

    pane: Pane
    generation: int


class RichWindowHost:
    """Window host that prints panes to a rich console, top to bottom."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._generation = 0

    def reset_layout(self) -> tuple[TerminalWindow, TerminalWindow, TerminalWindow]:
        self._generation += 1
        return (
            TerminalWindow(Pane.DESCRIPTION, self._generation),
            TerminalWindow(Pane.RESULT, self._generation),
            TerminalWindow(Pane.CODE, self._generation),
        )

    def is_live(self, window: TerminalWindow) -> bool:
        return window.generation == self._generation

    def display(self, window: TerminalWindow, buffer: Buffer) -> None:
        style = _PANE_STYLE[window.pane]
        title = f"{window.pane.value}: {buffer.name}"
        self.console.print(Panel(self._render(buffer), title=title, border_style=style))

    def display_default(self, buffer: Buffer) -> None:
        self.console.print(Panel(self._render(buffer), title=buffer.name))

    def message(self, text: str, level: str = "info") -> None:
        if level == "error":
            self.console.print(f"[red]{text}[/red]", highlight=False)
        else:
            self.console.print(text, highlight=False)

    @staticmethod
    def _render(buffer: Buffer) -> Markdown | Syntax | str:
        if buffer.path is not None and buffer.path.suffix == ".md":
            return Markdown(buffer.text)
        if buffer.path is not None:
            lexer = Syntax.guess_lexer(str(buffer.path), code=buffer.text)
            return Syntax(buffer.text, lexer, line_numbers=not buffer.read_only)
        return buffer.text


class ConsolePrompter:
    """Prompts for one option on the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.session: PromptSession[str] = PromptSession()

    async def choose(self, prompt: str, choices: Sequence[Choice]) -> str | None:
        if not choices:
            return None

        table = Table(show_header=False, box=None)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Option", style="bold")
        table.add_column("")
        for index, choice in enumerate(choices, start=1):
            table.add_row(str(index), choice.label, choice.annotation)
        self.console.print(table)

        completer = WordCompleter([c.value for c in choices], sentence=True)
        try:
            line = await asyncio.get_event_loop().run_in_executor(
                None,
                lambda: self.session.prompt(f"{prompt}: ", completer=completer),
            )
        except (KeyboardInterrupt, EOFError):
            return None

        return self._resolve(line.strip(), choices)

    @staticmethod
    def _resolve(answer: str, choices: Sequence[Choice]) -> str | None:
        if not answer:
            return None
        if answer.isdigit():
            index = int(answer) - 1
            if 0 <= index < len(choices):
                return choices[index].value
            return None
        for choice in choices:
            if choice.value == answer:
                return choice.value
        return None
