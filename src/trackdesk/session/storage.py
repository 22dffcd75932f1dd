"""Persistence of the current track across restarts.

The state file is a small YAML document:

    track: rust
    updated_at: 2026-01-17T10:30:00

Exercise metadata and manifest are never persisted; they are re-read from
the workspace when an exercise is selected again.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import yaml
from filelock import FileLock

from trackdesk.logging import get_logger

log = get_logger("storage")


class StateStore:
    """Reads and atomically writes the persisted session state file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()
        self._lock_path = self._path.with_suffix(".lock")

    @property
    def path(self) -> Path:
        return self._path

    def load_track(self) -> str | None:
        """Return the persisted track slug, or None if absent or unreadable."""
        if not self._path.exists():
            return None
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            log.warning("Failed to load state from %s: %s", self._path, e)
            return None
        track = data.get("track") if isinstance(data, dict) else None
        return str(track) if track else None

    def save_track(self, track: str | None) -> None:
        """Persist ``track`` (None clears it).

        Writes to a temp file and renames it over the state file while
        holding a file lock.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".yaml.tmp")
        data = {"track": track, "updated_at": datetime.now().isoformat(timespec="seconds")}

        with FileLock(self._lock_path, timeout=10):
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
                temp_path.replace(self._path)
            except OSError:
                if temp_path.exists():
                    temp_path.unlink()
                raise
        log.debug("Saved track %r to %s", track, self._path)
