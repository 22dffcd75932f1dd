"""Catalog records returned by the practice service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Difficulty(Enum):
    """Exercise difficulty as reported by the service."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class ExerciseInfo:
    """One exercise in a track listing. Used for display only."""

    slug: str
    difficulty: Difficulty | None = None  # None for values we don't recognise
    blurb: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExerciseInfo:
        if not isinstance(data, dict):
            raise TypeError(f"exercise entry must be a mapping, got {type(data).__name__}")
        try:
            difficulty = Difficulty(data.get("difficulty"))
        except ValueError:
            difficulty = None
        return cls(
            slug=str(data["slug"]),
            difficulty=difficulty,
            blurb=data.get("blurb") or "",
        )

    def annotation(self) -> str:
        """Short "difficulty: blurb" text for selection prompts."""
        level = self.difficulty.value if self.difficulty else "?"
        return f"{level}: {self.blurb}" if self.blurb else level


def pad_labels(exercises: list[ExerciseInfo]) -> list[tuple[str, ExerciseInfo]]:
    """Pair each exercise with its slug left-justified to the longest slug."""
    width = max((len(e.slug) for e in exercises), default=0)
    return [(e.slug.ljust(width), e) for e in exercises]
