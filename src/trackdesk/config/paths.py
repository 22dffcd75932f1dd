"""Platform-aware configuration path resolution.

Handles config file locations for:
- Windows: %PROGRAMDATA% (system), %APPDATA% (user)
- Unix: /etc/ (system), ~/.config/trackdesk/ or ~/.trackdesk/ (user)
- Project: $cwd/.trackdesk/
- The external tool's own user.json (token, workspace, API base URL)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
STATE_FILENAME = "state.yaml"
APP_NAME = "trackdesk"
SHORT_NAME = ".trackdesk"

TOOL_NAME = "exercism"
TOOL_CONFIG_FILENAME = "user.json"


def get_system_config_path() -> Path | None:
    """Get system-level config path.

    Returns:
        Path to system config file, or None if not determinable.
        The file may not exist.
    """
    if sys.platform == "win32":
        program_data = os.environ.get("PROGRAMDATA")
        if program_data:
            return Path(program_data) / APP_NAME / CONFIG_FILENAME
        return None
    return Path("/etc") / APP_NAME / CONFIG_FILENAME


def get_user_config_dir() -> Path | None:
    """Get the per-user directory holding config.yaml and state.yaml."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME

    home = Path.home()
    xdg_default = home / ".config"
    if xdg_default.exists():
        return xdg_default / APP_NAME

    return home / SHORT_NAME


def get_user_config_path() -> Path | None:
    """Get user-level config path (the file may not exist)."""
    user_dir = get_user_config_dir()
    if user_dir is None:
        return None
    return user_dir / CONFIG_FILENAME


def get_project_config_path(project_root: str) -> Path:
    """Get project-level config path (may not exist)."""
    return Path(project_root) / SHORT_NAME / CONFIG_FILENAME


def get_state_path() -> Path:
    """Get the file that persists the current track across restarts."""
    user_dir = get_user_config_dir()
    if user_dir is None:
        return Path.home() / SHORT_NAME / STATE_FILENAME
    return user_dir / STATE_FILENAME


def get_tool_config_path() -> Path | None:
    """Get the external tool's user.json path.

    The tool honours EXERCISM_CONFIG_HOME, then the platform config dir.
    """
    override = os.environ.get("EXERCISM_CONFIG_HOME")
    if override:
        return Path(override) / TOOL_CONFIG_FILENAME

    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / TOOL_NAME / TOOL_CONFIG_FILENAME
        return None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / TOOL_NAME / TOOL_CONFIG_FILENAME
    return Path.home() / ".config" / TOOL_NAME / TOOL_CONFIG_FILENAME


def get_config_paths(project_root: str | None = None) -> list[Path]:
    """Get all YAML config paths in priority order (lowest to highest).

    Args:
        project_root: Optional project directory for project-level config.

    Returns:
        List of config paths in order: system, user, project.
        Later paths override earlier ones when merging.
    """
    paths: list[Path] = []

    system_path = get_system_config_path()
    if system_path:
        paths.append(system_path)

    user_path = get_user_config_path()
    if user_path:
        paths.append(user_path)

    if project_root:
        paths.append(get_project_config_path(project_root))

    return paths
