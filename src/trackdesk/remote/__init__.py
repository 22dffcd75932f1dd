"""Client for the remote practice service (tracks, exercises, solutions)."""

from trackdesk.remote.client import RemoteCatalogClient
from trackdesk.remote.types import Difficulty, ExerciseInfo, pad_labels

__all__ = [
    "Difficulty",
    "ExerciseInfo",
    "RemoteCatalogClient",
    "pad_labels",
]
