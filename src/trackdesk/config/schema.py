"""Configuration schema dataclasses for trackdesk.

All fields have defaults so partial configs from several files can be
merged together. Credentials default to None and are validated by
``require_credentials`` only where a workflow needs them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_API_URL = "https://exercism.org/api/v2"
DEFAULT_TOOL = "exercism"
BOOTSTRAP_EXERCISE = "hello-world"


@dataclass
class ApiConfig:
    """Remote practice service settings."""

    base_url: str = DEFAULT_API_URL
    token: str | None = None  # Bearer token for solution mutations
    timeout: float = 30.0  # Seconds per request


@dataclass
class WorkspaceConfig:
    """Local workspace settings."""

    root: str | None = None  # Directory holding <track>/<exercise>/


@dataclass
class ToolConfig:
    """External command-line tool settings."""

    command: str = DEFAULT_TOOL
    timeout: float | None = 300.0  # Downloads can be slow; None disables


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class SessionConfig:
    """Session behaviour.

    Example config.yaml:
        session:
          bootstrap_exercise: hello-world
          state_file: ~/.config/trackdesk/state.yaml
    """

    bootstrap_exercise: str = BOOTSTRAP_EXERCISE  # Downloaded when a track is first set
    state_file: str | None = None  # Overrides the default state.yaml location


@dataclass
class Config:
    """Root configuration object."""

    api: ApiConfig = field(default_factory=ApiConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    tool: ToolConfig = field(default_factory=ToolConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown keys, kept verbatim
