"""Per-exercise files written by the external tool on download.

Both live in a hidden ``.exercism`` directory inside the exercise dir:
- metadata.json: remote ids and URLs (id, track, exercise, url)
- config.json: file roles under ``files`` (solution, test, example, ...)
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from trackdesk.errors import PreconditionError
from trackdesk.logging import get_logger
from trackdesk.result import Err, Ok

log = get_logger("workspace")

HIDDEN_DIR = ".exercism"
METADATA_FILE = "metadata.json"
MANIFEST_FILE = "config.json"


@dataclass(frozen=True, slots=True)
class ExerciseMetadata:
    """Remote identifiers for a downloaded exercise."""

    id: str
    track: str
    exercise: str
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExerciseMetadata:
        exercise_id = data.get("id")
        if exercise_id is None or exercise_id == "":
            raise KeyError("id")
        return cls(
            id=str(exercise_id),
            track=str(data["track"]),
            exercise=str(data["exercise"]),
            url=str(data.get("url") or ""),
        )


@dataclass(frozen=True, slots=True)
class ExerciseFileManifest:
    """Mapping from file role to relative paths, in listed order."""

    files: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExerciseFileManifest:
        raw = data.get("files") or {}
        if not isinstance(raw, dict):
            raise TypeError(f"'files' must be a mapping, got {type(raw).__name__}")
        return cls(files={
            str(role): tuple(str(p) for p in paths)
            for role, paths in raw.items()
            if isinstance(paths, list)
        })

    def paths(self, role: str) -> tuple[str, ...]:
        return self.files.get(role, ())

    @property
    def solution(self) -> tuple[str, ...]:
        return self.paths("solution")

    @property
    def test(self) -> tuple[str, ...]:
        return self.paths("test")

    def first(self, role: str) -> Ok[str] | Err:
        """First path for ``role``, or a precondition failure if none is listed."""
        paths = self.paths(role)
        if not paths:
            return Err(PreconditionError(f"no {role} file listed for this exercise"))
        return Ok(paths[0])


def _read_json(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Unreadable %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        log.warning("Unexpected content in %s", path)
        return None
    return data


def read_metadata(exercise_dir: Path) -> ExerciseMetadata | None:
    """Read metadata.json; absent or malformed yields None."""
    data = _read_json(exercise_dir / HIDDEN_DIR / METADATA_FILE)
    if data is None:
        return None
    try:
        return ExerciseMetadata.from_dict(data)
    except KeyError as e:
        log.warning("metadata.json in %s lacks %s", exercise_dir, e)
        return None


def read_manifest(exercise_dir: Path) -> ExerciseFileManifest | None:
    """Read config.json; absent or malformed yields None."""
    data = _read_json(exercise_dir / HIDDEN_DIR / MANIFEST_FILE)
    if data is None:
        return None
    try:
        return ExerciseFileManifest.from_dict(data)
    except TypeError as e:
        log.warning("config.json in %s is malformed: %s", exercise_dir, e)
        return None
