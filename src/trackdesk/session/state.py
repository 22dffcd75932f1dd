"""Session state: current track and the current exercise pair."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from trackdesk.errors import PreconditionError
from trackdesk.result import Err, Ok
from trackdesk.workspace.files import ExerciseFileManifest, ExerciseMetadata


@dataclass(frozen=True, slots=True)
class ExerciseContext:
    """Metadata and manifest of the selected exercise, stored as one unit.

    Holding both in a single immutable object means the session can never
    expose one without the other.
    """

    metadata: ExerciseMetadata
    manifest: ExerciseFileManifest
    directory: Path

    @property
    def slug(self) -> str:
        """"track/exercise" label for messages."""
        return f"{self.metadata.track}/{self.metadata.exercise}"

    def file_path(self, relative: str) -> Path:
        return self.directory / relative


@dataclass
class SessionSnapshot:
    """Read-only view of the session for status display."""

    track: str | None
    exercise: str | None
    exercise_id: str | None
    directory: Path | None


class SessionState:
    """Process-wide session state with an atomic exercise pair.

    Only orchestration code (track/exercise selection and exercise setup)
    writes here; everything else reads.
    """

    def __init__(self, workspace_root: Path, track: str | None = None) -> None:
        self._workspace_root = Path(workspace_root)
        self._track = track
        self._exercise: ExerciseContext | None = None

    @property
    def workspace_root(self) -> Path:
        return self._workspace_root

    @property
    def track(self) -> str | None:
        return self._track

    @property
    def exercise(self) -> ExerciseContext | None:
        return self._exercise

    def set_track(self, track: str) -> None:
        if not track:
            raise ValueError("track slug must be non-empty")
        self._track = track

    def clear_track(self) -> None:
        self._track = None

    def set_exercise(
        self,
        metadata: ExerciseMetadata,
        manifest: ExerciseFileManifest,
        directory: Path,
    ) -> ExerciseContext:
        """Replace the exercise pair wholesale and return it."""
        self._exercise = ExerciseContext(metadata=metadata, manifest=manifest, directory=directory)
        return self._exercise

    def clear_exercise(self) -> None:
        self._exercise = None

    def require_track(self) -> Ok[str] | Err:
        if self._track is None:
            return Err(PreconditionError("track not set"))
        return Ok(self._track)

    def require_exercise(self) -> Ok[ExerciseContext] | Err:
        if self._exercise is None:
            return Err(PreconditionError("exercise not set"))
        return Ok(self._exercise)

    def snapshot(self) -> SessionSnapshot:
        exercise = self._exercise
        return SessionSnapshot(
            track=self._track,
            exercise=exercise.metadata.exercise if exercise else None,
            exercise_id=exercise.metadata.id if exercise else None,
            directory=exercise.directory if exercise else None,
        )
