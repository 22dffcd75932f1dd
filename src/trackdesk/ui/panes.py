"""Pane and buffer types for the three-pane coding layout."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Pane(Enum):
    """Fixed presentation slots.

    Layout: code on the right; description top-left; result bottom-left.
    """

    DESCRIPTION = "description"
    RESULT = "result"
    CODE = "code"


@dataclass
class Buffer:
    """Text to show in a pane.

    Attributes:
        name: Display name (file name or a label like "*result*").
        text: Buffer contents.
        read_only: True for descriptions and tool output.
        path: Backing file, if any; editable buffers are saved here.
    """

    name: str
    text: str = ""
    read_only: bool = True
    path: Path | None = None

    @classmethod
    def from_file(cls, path: Path, read_only: bool = True) -> Buffer:
        return cls(
            name=path.name,
            text=path.read_text(encoding="utf-8", errors="replace"),
            read_only=read_only,
            path=path,
        )
