"""Named commands shared by the one-shot CLI and the interactive shell."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

from trackdesk.errors import PreconditionError
from trackdesk.result import Err, Ok
from trackdesk.session.actions import SolutionAction

if TYPE_CHECKING:
    from trackdesk.session.coordinator import SessionCoordinator

Outcome = Ok[Any] | Err

COMMAND_HELP: dict[str, str] = {
    "tracks": "List available tracks",
    "exercises": "List exercises in the current (or given) track",
    "track": "Set the current track",
    "exercise": "Set the current exercise",
    "code": "Lay out description, result and code panes",
    "test": "Run the exercise's tests",
    "submit": "Submit the current solution",
    "download": "Download the current exercise again",
    "readme": "Show the exercise README",
    "help": "Show the exercise HELP",
    "tests": "Show the first test file",
    "open": "Open the exercise page in a browser",
    "complete": "Mark the exercise complete",
    "publish": "Publish the solution",
    "unpublish": "Unpublish the solution",
    "configure": "Configure the command-line tool with our token and workspace",
    "status": "Show the current track and exercise",
}


class CommandHandler:
    """Maps command names onto coordinator calls and renders listings."""

    def __init__(self, coordinator: SessionCoordinator, console: Console | None = None) -> None:
        self.coordinator = coordinator
        self.console = console or Console()
        self._handlers: dict[str, Callable[[str | None, bool], Awaitable[Outcome]]] = {
            "tracks": self._cmd_tracks,
            "exercises": self._cmd_exercises,
            "track": self._cmd_track,
            "exercise": self._cmd_exercise,
            "code": lambda arg, force: coordinator.start_coding(),
            "test": lambda arg, force: coordinator.run_tests(),
            "submit": lambda arg, force: coordinator.submit(),
            "download": lambda arg, force: coordinator.download(force=force),
            "readme": self._sync(coordinator.open_readme),
            "help": self._sync(coordinator.open_help),
            "tests": self._sync(coordinator.open_tests),
            "open": self._sync(coordinator.open_in_browser),
            "complete": lambda arg, force: coordinator.dispatch(SolutionAction.COMPLETE),
            "publish": lambda arg, force: coordinator.dispatch(SolutionAction.PUBLISH),
            "unpublish": lambda arg, force: coordinator.dispatch(SolutionAction.UNPUBLISH),
            "configure": lambda arg, force: coordinator.configure(),
            "status": self._cmd_status,
        }

    @property
    def names(self) -> list[str]:
        return list(self._handlers)

    @staticmethod
    def _sync(call: Callable[[], Outcome]) -> Callable[[str | None, bool], Awaitable[Outcome]]:
        async def wrapper(arg: str | None, force: bool) -> Outcome:
            return call()

        return wrapper

    async def run(
        self,
        name: str,
        arg: str | None = None,
        *,
        track: str | None = None,
        exercise: str | None = None,
        force: bool = False,
    ) -> Outcome:
        """Run a command, first selecting ``track``/``exercise`` if given."""
        handler = self._handlers.get(name)
        if handler is None:
            self.console.print(f"[red]Unknown command: {name}[/red]")
            return Err(PreconditionError(f"unknown command: {name}"))

        if track and name not in ("track", "tracks", "exercises"):
            selected = await self.coordinator.select_track(track)
            if isinstance(selected, Err):
                return selected
        if exercise and name != "exercise":
            loaded = await self.coordinator.select_exercise(exercise)
            if isinstance(loaded, Err):
                return loaded

        return await handler(arg if arg is not None else _default_arg(name, track, exercise), force)

    async def _cmd_tracks(self, arg: str | None, force: bool) -> Outcome:
        result = await self.coordinator.list_tracks()
        if isinstance(result, Ok):
            for slug in result.value:
                marker = "*" if slug == self.coordinator.state.track else " "
                self.console.print(f"{marker} {slug}", highlight=False)
        return result

    async def _cmd_exercises(self, arg: str | None, force: bool) -> Outcome:
        result = await self.coordinator.list_exercises(arg)
        if isinstance(result, Ok):
            table = Table(show_header=False, box=None)
            table.add_column("Exercise", style="bold")
            table.add_column("Difficulty")
            table.add_column("")
            for label, info in result.value:
                difficulty = info.difficulty.value if info.difficulty else "?"
                table.add_row(label, difficulty, info.blurb)
            self.console.print(table)
        return result

    async def _cmd_track(self, arg: str | None, force: bool) -> Outcome:
        return await self.coordinator.select_track(arg)

    async def _cmd_exercise(self, arg: str | None, force: bool) -> Outcome:
        return await self.coordinator.select_exercise(arg)

    async def _cmd_status(self, arg: str | None, force: bool) -> Outcome:
        snapshot = self.coordinator.status()
        self.console.print(f"track:    {snapshot.track or '-'}", highlight=False)
        self.console.print(f"exercise: {snapshot.exercise or '-'}", highlight=False)
        if snapshot.directory is not None:
            self.console.print(f"path:     {snapshot.directory}", highlight=False)
        return Ok(snapshot)

    def print_help(self) -> None:
        table = Table(title="Available Commands")
        table.add_column("Command", style="bold")
        table.add_column("Description")
        for name, description in COMMAND_HELP.items():
            table.add_row(name, description)
        table.add_row("quit", "Leave the shell")
        self.console.print(table)


def _default_arg(name: str, track: str | None, exercise: str | None) -> str | None:
    if name in ("track", "exercises"):
        return track
    if name == "exercise":
        return exercise
    return None
