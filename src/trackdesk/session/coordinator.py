"""Session orchestration: track/exercise selection and gated actions.

States: no track -> track selected -> exercise selected. Every step returns
``Ok``/``Err``; a failed step clears the session fields it was about to set
and reports the error, so the user can simply retry.

Only one workflow runs at a time. Starting a second while the first is
suspended on the network or a subprocess returns a PreconditionError and
leaves the session untouched.
"""

from __future__ import annotations

import webbrowser
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from trackdesk.config.loader import require_credentials
from trackdesk.config.paths import get_state_path
from trackdesk.errors import ConfigError, PreconditionError, TrackdeskError
from trackdesk.logging import get_logger
from trackdesk.remote.client import RemoteCatalogClient
from trackdesk.remote.types import ExerciseInfo
from trackdesk.result import Err, Ok
from trackdesk.session.actions import SolutionAction, SolutionActionDispatcher
from trackdesk.session.state import ExerciseContext, SessionSnapshot, SessionState
from trackdesk.session.storage import StateStore
from trackdesk.terminal.runner import CommandRunner
from trackdesk.terminal.subprocess_executor import SubprocessCommandExecutor
from trackdesk.ui.coordinator import UICoordinator
from trackdesk.ui.panes import Buffer
from trackdesk.ui.protocol import Choice
from trackdesk.workspace.cache import LocalWorkspaceCache

if TYPE_CHECKING:
    from trackdesk.config.schema import Config
    from trackdesk.terminal.protocol import CommandExecutor
    from trackdesk.ui.protocol import Prompter, WindowHost

log = get_logger("session")

T = TypeVar("T")

README_FILE = "README.md"
HELP_FILE = "HELP.md"


class SessionCoordinator:
    """Drives the session state machine and every action gated on it."""

    def __init__(
        self,
        *,
        state: SessionState,
        cache: LocalWorkspaceCache,
        client: RemoteCatalogClient,
        runner: CommandRunner,
        prompter: Prompter,
        ui: UICoordinator,
        store: StateStore | None = None,
        token: str | None = None,
        bootstrap_exercise: str = "hello-world",
        open_url: Callable[[str], object] = webbrowser.open,
    ) -> None:
        self.state = state
        self.cache = cache
        self.client = client
        self.runner = runner
        self.prompter = prompter
        self.ui = ui
        self._store = store
        self._token = token
        self._bootstrap_exercise = bootstrap_exercise
        self._open_url = open_url
        self._actions = SolutionActionDispatcher(state, client, status=ui)
        self._active: str | None = None

    @classmethod
    def from_config(
        cls,
        config: Config,
        host: WindowHost,
        prompter: Prompter,
        *,
        executor: CommandExecutor | None = None,
        client: RemoteCatalogClient | None = None,
    ) -> SessionCoordinator:
        """Wire up a coordinator from configuration.

        Raises:
            ConfigError: If the API token or workspace root is missing,
                or the workspace root cannot be created.
        """
        token, root = require_credentials(config)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create workspace directory {root}: {e}") from e

        runner = CommandRunner(
            executor or SubprocessCommandExecutor(default_cwd=str(root)),
            command=config.tool.command,
            timeout=config.tool.timeout,
        )
        if client is None:
            client = RemoteCatalogClient(config.api.base_url, token, timeout=config.api.timeout)

        state_path = Path(config.session.state_file) if config.session.state_file else get_state_path()
        store = StateStore(state_path)
        state = SessionState(root, track=store.load_track())
        if state.track:
            log.debug("Restored track %s", state.track)

        return cls(
            state=state,
            cache=LocalWorkspaceCache(root, runner),
            client=client,
            runner=runner,
            prompter=prompter,
            ui=UICoordinator(host),
            store=store,
            token=token,
            bootstrap_exercise=config.session.bootstrap_exercise,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        """True while a workflow is suspended mid-flight."""
        return self._active is not None

    async def _guarded(self, name: str, workflow: Callable[[], Awaitable[T]]) -> T | Err:
        if self._active is not None:
            return self._fail(
                name, PreconditionError(f"another operation is in progress ({self._active})")
            )
        self._active = name
        try:
            return await workflow()
        finally:
            self._active = None

    def _fail(self, operation: str, error: TrackdeskError) -> Err:
        log.warning("%s failed: %s", operation, error.message)
        self.ui.message(f"{operation} failed: {error.message}", "error")
        return Err(error)

    def _persist_track(self, track: str | None) -> None:
        if self._store is None:
            return
        try:
            self._store.save_track(track)
        except OSError as e:
            log.warning("Could not persist track to %s: %s", self._store.path, e)

    def _require_exercise(self, operation: str) -> Ok[ExerciseContext] | Err:
        required = self.state.require_exercise()
        if isinstance(required, Err):
            return self._fail(operation, required.error)
        return required

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def list_tracks(self) -> Ok[list[str]] | Err:
        result = await self.client.list_tracks()
        if isinstance(result, Err):
            return self._fail("list tracks", result.error)
        return result

    async def list_exercises(self, track: str | None = None) -> Ok[list[tuple[str, ExerciseInfo]]] | Err:
        track = track or self.state.track
        if track is None:
            return self._fail("list exercises", PreconditionError("track not set"))
        result = await self.client.list_exercises(track)
        if isinstance(result, Err):
            return self._fail("list exercises", result.error)
        return result

    # -------------------------------------------------------------------------
    # Selection flow
    # -------------------------------------------------------------------------

    async def select_track(self, track: str | None = None) -> Ok[str] | Err:
        """Make ``track`` current, prompting from the catalog if not given."""
        return await self._guarded("set track", lambda: self._select_track(track))

    async def _select_track(self, track: str | None = None) -> Ok[str] | Err:
        if track is None:
            tracks = await self.client.list_tracks()
            if isinstance(tracks, Err):
                return self._fail("set track", tracks.error)

            track = await self.prompter.choose("Track", [Choice(t, t) for t in tracks.value])
            if track is None:
                return Err(PreconditionError("no track selected"))

        if track != self.state.track:
            self.state.clear_exercise()

        if not self.cache.track_dir(track).is_dir():
            # First visit: pull the bootstrap exercise to prove the tool can reach the track
            setup = await self.cache.setup_exercise(self.state, track, self._bootstrap_exercise)
            if isinstance(setup, Err):
                self.state.clear_track()
                self._persist_track(None)
                return self._fail(f"set track {track}", setup.error)

        self.state.set_track(track)
        self._persist_track(track)
        self.ui.message(f"Track set to {track}")
        return Ok(track)

    async def select_exercise(self, exercise: str | None = None) -> Ok[ExerciseContext] | Err:
        """Load ``exercise`` from the current track, prompting if not given."""
        return await self._guarded("set exercise", lambda: self._select_exercise(exercise))

    async def _select_exercise(self, exercise: str | None = None) -> Ok[ExerciseContext] | Err:
        required = self.state.require_track()
        if isinstance(required, Err):
            return self._fail("set exercise", required.error)
        track = required.value

        if exercise is None:
            listing = await self.client.list_exercises(track)
            if isinstance(listing, Err):
                return self._fail("set exercise", listing.error)

            choices = [Choice(info.slug, label, info.annotation()) for label, info in listing.value]
            exercise = await self.prompter.choose("Exercise", choices)
            if exercise is None:
                return Err(PreconditionError("no exercise selected"))

        return await self._setup(track, exercise)

    async def _setup(self, track: str, exercise: str, force: bool = False) -> Ok[ExerciseContext] | Err:
        setup = await self.cache.setup_exercise(self.state, track, exercise, force=force)
        if isinstance(setup, Err):
            return self._fail(f"set exercise {track}/{exercise}", setup.error)
        self.ui.message(f"Exercise set to {setup.value.slug}")
        return setup

    async def start_coding(self) -> Ok[ExerciseContext] | Err:
        """Select whatever is missing, then lay out the three panes."""
        return await self._guarded("start coding", self._start_coding)

    async def _start_coding(self) -> Ok[ExerciseContext] | Err:
        context = self.state.exercise
        if context is None:
            if self.state.track is None:
                track = await self._select_track()
                if isinstance(track, Err):
                    return track
            selected = await self._select_exercise()
            if isinstance(selected, Err):
                return selected
            context = selected.value

        solution = context.manifest.first("solution")
        if isinstance(solution, Err):
            return self._fail("open code", solution.error)
        solution_path = context.file_path(solution.value)
        if not solution_path.is_file():
            return self._fail("open code", PreconditionError(f"{solution_path} does not exist"))

        self.ui.layout()
        self.ui.show_description(self._description_buffer(context, README_FILE))
        self.ui.show_result("")
        self.ui.show_code(Buffer.from_file(solution_path, read_only=False))
        return Ok(context)

    # -------------------------------------------------------------------------
    # Exercise actions
    # -------------------------------------------------------------------------

    async def run_tests(self) -> Ok[str] | Err:
        """Run the tool's test command and show its output."""
        return await self._guarded("test", lambda: self._run_tool("test", self.runner.test))

    async def submit(self) -> Ok[str] | Err:
        """Submit the current solution and show the tool's output."""
        return await self._guarded("submit", lambda: self._run_tool("submit", self.runner.submit))

    async def _run_tool(
        self, operation: str, call: Callable[[Path], Awaitable[Ok[str] | Err]]
    ) -> Ok[str] | Err:
        required = self._require_exercise(operation)
        if isinstance(required, Err):
            return required
        context = required.value

        self.ui.show_result("")
        result = await call(context.directory)
        if isinstance(result, Err):
            self.ui.show_result(result.message)
            return self._fail(operation, result.error)
        self.ui.show_result(result.value)
        return result

    async def download(self, force: bool = True) -> Ok[ExerciseContext] | Err:
        """Fetch the current exercise again and reload its files."""
        return await self._guarded("download", lambda: self._download(force))

    async def _download(self, force: bool) -> Ok[ExerciseContext] | Err:
        required = self._require_exercise("download")
        if isinstance(required, Err):
            return required
        metadata = required.value.metadata
        return await self._setup(metadata.track, metadata.exercise, force=force)

    async def dispatch(self, action: SolutionAction) -> Ok[str] | Err:
        """Complete, publish or unpublish the current solution."""
        return await self._guarded(action.value, lambda: self._actions.dispatch(action))

    async def configure(self, workspace: Path | None = None) -> Ok[str] | Err:
        """Point the external tool at our token and workspace."""
        return await self._guarded("configure", lambda: self._configure(workspace))

    async def _configure(self, workspace: Path | None) -> Ok[str] | Err:
        if not self._token:
            return self._fail("configure", PreconditionError("no API token configured"))
        result = await self.runner.configure(self._token, workspace or self.state.workspace_root)
        if isinstance(result, Err):
            return self._fail("configure", result.error)
        self.ui.message("Configured the command-line tool")
        return result

    # -------------------------------------------------------------------------
    # Viewing
    # -------------------------------------------------------------------------

    def _description_buffer(self, context: ExerciseContext, name: str) -> Buffer:
        path = context.file_path(name)
        if path.is_file():
            return Buffer.from_file(path)
        return Buffer(name=name, text=f"No {name} in {context.directory}")

    def open_readme(self) -> Ok[Path] | Err:
        return self._open_document(README_FILE)

    def open_help(self) -> Ok[Path] | Err:
        return self._open_document(HELP_FILE)

    def _open_document(self, name: str) -> Ok[Path] | Err:
        required = self._require_exercise(f"open {name}")
        if isinstance(required, Err):
            return required
        path = required.value.file_path(name)
        if not path.is_file():
            return self._fail(f"open {name}", PreconditionError(f"{path} does not exist"))
        self.ui.show_description(Buffer.from_file(path))
        return Ok(path)

    def open_tests(self) -> Ok[Path] | Err:
        required = self._require_exercise("open tests")
        if isinstance(required, Err):
            return required
        context = required.value
        test_file = context.manifest.first("test")
        if isinstance(test_file, Err):
            return self._fail("open tests", test_file.error)
        path = context.file_path(test_file.value)
        if not path.is_file():
            return self._fail("open tests", PreconditionError(f"{path} does not exist"))
        self.ui.show_result(path.read_text(encoding="utf-8", errors="replace"), title=path.name)
        return Ok(path)

    def open_in_browser(self) -> Ok[str] | Err:
        required = self._require_exercise("open in browser")
        if isinstance(required, Err):
            return required
        url = required.value.metadata.url
        if not url:
            return self._fail("open in browser", PreconditionError("exercise has no URL"))
        try:
            self._open_url(url)
        except (webbrowser.Error, OSError) as e:
            return self._fail("open in browser", TrackdeskError(f"could not open {url}: {e}"))
        return Ok(url)

    def status(self) -> SessionSnapshot:
        return self.state.snapshot()
