"""Local workspace: exercise directories and the files the tool writes."""

from trackdesk.workspace.cache import LocalWorkspaceCache
from trackdesk.workspace.files import (
    ExerciseFileManifest,
    ExerciseMetadata,
    read_manifest,
    read_metadata,
)

__all__ = [
    "ExerciseFileManifest",
    "ExerciseMetadata",
    "LocalWorkspaceCache",
    "read_manifest",
    "read_metadata",
]
