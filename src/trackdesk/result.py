"""Tagged result type shared by every fallible orchestration step.

Operations return ``Ok(value)`` or ``Err(error)`` instead of raising, so
callers branch once and either continue the chain or stop and report.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeAlias, TypeVar

from trackdesk.errors import TrackdeskError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err:
    """Failed outcome carrying the error that stopped the chain."""

    error: TrackdeskError

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return self.error.message


Result: TypeAlias = Ok[T] | Err

# Either the exercise directory, or the reason it could not be materialized
DownloadResult: TypeAlias = Ok[Path] | Err
