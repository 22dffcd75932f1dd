"""Interactive shell: one long-lived session across many commands."""

from __future__ import annotations

import asyncio
import shlex
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory

from trackdesk.commands import CommandHandler


class InteractiveShell:
    """Reads ``command [argument]`` lines and runs them against one session.

    Unlike one-shot CLI calls, the selected exercise stays loaded between
    commands, so ``exercise two-fer`` followed by ``test`` just works.
    """

    def __init__(self, handler: CommandHandler, history_file: Path | None = None) -> None:
        self.handler = handler
        self._running = False

        history = FileHistory(str(history_file)) if history_file else None
        self.session: PromptSession[str] = PromptSession(
            history=history,
            auto_suggest=AutoSuggestFromHistory(),
            completer=WordCompleter([*handler.names, "quit"]),
        )

    def _prompt_text(self) -> str:
        snapshot = self.handler.coordinator.status()
        where = "/".join(part for part in (snapshot.track, snapshot.exercise) if part)
        return f"trackdesk({where})> " if where else "trackdesk> "

    async def run(self) -> None:
        """Run until ``quit`` or end of input."""
        self._running = True
        console = self.handler.console
        console.print("Type [bold]help[/bold] for exercise help, [bold]?[/bold] for commands.")

        while self._running:
            try:
                prompt = self._prompt_text()
                line = await asyncio.get_event_loop().run_in_executor(
                    None,
                    lambda: self.session.prompt(prompt),
                )
            except KeyboardInterrupt:
                continue
            except EOFError:
                break

            try:
                parts = shlex.split(line)
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
                continue
            if not parts:
                continue

            name, args = parts[0].lower(), parts[1:]
            if name in ("quit", "exit"):
                break
            if name == "?":
                self.handler.print_help()
                continue

            force = "--no-force" not in args
            positional = [a for a in args if a not in ("--force", "--no-force")]
            await self.handler.run(name, positional[0] if positional else None, force=force)

        self._running = False

    def stop(self) -> None:
        """Stop after the current command."""
        self._running = False
