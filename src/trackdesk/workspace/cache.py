"""On-disk exercise cache keyed by (track, exercise).

An exercise directory that already exists is reused without invoking the
external tool; only a missing directory or an explicit force triggers a
download.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from trackdesk.errors import ToolError
from trackdesk.logging import get_logger
from trackdesk.result import DownloadResult, Err, Ok
from trackdesk.workspace.files import (
    ExerciseFileManifest,
    ExerciseMetadata,
    read_manifest,
    read_metadata,
)

if TYPE_CHECKING:
    from trackdesk.session.state import ExerciseContext, SessionState
    from trackdesk.terminal.runner import CommandRunner

log = get_logger("workspace")


class LocalWorkspaceCache:
    """Maps (track, exercise) to a directory under the workspace root."""

    def __init__(self, root: Path, runner: CommandRunner) -> None:
        self._root = Path(root)
        self._runner = runner

    @property
    def root(self) -> Path:
        return self._root

    def track_dir(self, track: str) -> Path:
        return self._root / track

    def resolve_exercise_dir(self, track: str, exercise: str) -> Path:
        """Pure path join; no I/O."""
        return self._root / track / exercise

    def is_downloaded(self, track: str, exercise: str) -> bool:
        return self.resolve_exercise_dir(track, exercise).is_dir()

    async def ensure_downloaded(
        self, track: str, exercise: str, force: bool = False
    ) -> DownloadResult:
        """Return the exercise directory, downloading it if needed.

        Args:
            track: Track slug.
            exercise: Exercise slug.
            force: Download even if the directory already exists.

        Returns:
            Ok(path) on cache hit or successful download, Err(ToolError)
            carrying the tool's error text otherwise.
        """
        exercise_dir = self.resolve_exercise_dir(track, exercise)
        if not force and exercise_dir.is_dir():
            log.debug("Cache hit for %s/%s", track, exercise)
            return Ok(exercise_dir)

        log.info("Downloading %s/%s", track, exercise)
        result = await self._runner.download(track, exercise, force=True)
        if isinstance(result, Err):
            return result
        if not exercise_dir.is_dir():
            return Err(ToolError(
                f"Error: download reported success but {exercise_dir} does not exist"
            ))
        return Ok(exercise_dir)

    def read_manifest(self, exercise_dir: Path) -> ExerciseFileManifest | None:
        return read_manifest(exercise_dir)

    def read_metadata(self, exercise_dir: Path) -> ExerciseMetadata | None:
        return read_metadata(exercise_dir)

    def _read_pair(
        self, exercise_dir: Path
    ) -> tuple[ExerciseMetadata, ExerciseFileManifest] | None:
        metadata = self.read_metadata(exercise_dir)
        manifest = self.read_manifest(exercise_dir)
        if metadata is None or manifest is None:
            return None
        return metadata, manifest

    async def setup_exercise(
        self,
        state: SessionState,
        track: str,
        exercise: str,
        force: bool = False,
    ) -> Ok[ExerciseContext] | Err:
        """Materialize an exercise and load it into the session.

        On success both metadata and manifest replace the session's pair
        in one step; on any failure the pair is cleared. A cached directory
        missing either file is re-downloaded once before giving up.
        """
        downloaded = await self.ensure_downloaded(track, exercise, force=force)
        if isinstance(downloaded, Err):
            state.clear_exercise()
            return downloaded

        exercise_dir = downloaded.value
        pair = self._read_pair(exercise_dir)
        if pair is None and not force:
            log.info("%s/%s is incomplete on disk, downloading again", track, exercise)
            downloaded = await self.ensure_downloaded(track, exercise, force=True)
            if isinstance(downloaded, Err):
                state.clear_exercise()
                return downloaded
            pair = self._read_pair(exercise_dir)

        if pair is None:
            state.clear_exercise()
            return Err(ToolError(
                f"Error: {exercise_dir} has no readable exercise metadata and file list"
            ))

        metadata, manifest = pair
        context = state.set_exercise(metadata, manifest, exercise_dir)
        log.info("Exercise set to %s/%s", track, exercise)
        return Ok(context)
