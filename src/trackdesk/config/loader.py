"""Configuration file loading and caching.

Handles:
- The external tool's user.json (token, workspace, API base URL)
- YAML file parsing with cascading deep merge
- Environment variable overrides and secret lookup for the token
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from trackdesk.config.paths import get_config_paths, get_tool_config_path
from trackdesk.config.schema import (
    DEFAULT_API_URL,
    ApiConfig,
    Config,
    LoggingConfig,
    SessionConfig,
    ToolConfig,
    WorkspaceConfig,
)
from trackdesk.config.secrets import TOKEN_KEY, fetch_secret
from trackdesk.errors import ConfigError

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("trackdesk.config")

_cached_config: Config | None = None


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested dicts merge recursively, lists and scalars are replaced, and
    None in ``override`` never clears a value set in ``base``.
    """
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configs in order; later ones win."""
    result: dict[str, Any] = {}
    for config in configs:
        if config:
            result = deep_merge(result, config)
    return result


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def load_tool_config(path: Path | None = None) -> dict[str, Any]:
    """Read the external tool's user.json and map it onto our config keys.

    The tool owns this file; only ``token``, ``workspace`` and
    ``apibaseurl`` are consumed.
    """
    path = path or get_tool_config_path()
    if path is None or not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        _log.warning("Unreadable tool config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        return {}

    mapped: dict[str, Any] = {}
    if data.get("token"):
        mapped.setdefault("api", {})["token"] = data["token"]
    if data.get("apibaseurl"):
        mapped.setdefault("api", {})["base_url"] = data["apibaseurl"]
    if data.get("workspace"):
        mapped["workspace"] = {"root": data["workspace"]}
    return mapped


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables.

    The token is NOT read here; it goes through fetch_secret().
    """
    overrides: dict[str, Any] = {}

    workspace = os.environ.get("TRACKDESK_WORKSPACE")
    if workspace:
        overrides["workspace"] = {"root": workspace}

    api_url = os.environ.get("TRACKDESK_API_URL")
    if api_url:
        overrides["api"] = {"base_url": api_url}

    tool = os.environ.get("TRACKDESK_TOOL")
    if tool:
        overrides["tool"] = {"command": tool}

    log_path = os.environ.get("TRACKDESK_LOG")
    if log_path:
        overrides["logging"] = {"file": log_path}

    return overrides


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    api_data = data.get("api", {})
    api = ApiConfig(
        base_url=str(api_data.get("base_url") or DEFAULT_API_URL).rstrip("/"),
        token=api_data.get("token"),
        timeout=float(api_data.get("timeout", 30.0)),
    )

    workspace_data = data.get("workspace", {})
    root = workspace_data.get("root")
    workspace = WorkspaceConfig(root=os.path.expanduser(root) if root else None)

    tool_data = data.get("tool", {})
    tool = ToolConfig(
        command=tool_data.get("command", ToolConfig.command),
        timeout=tool_data.get("timeout", ToolConfig.timeout),
    )

    log_data = data.get("logging", {})
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    session_data = data.get("session", {})
    session = SessionConfig(
        bootstrap_exercise=session_data.get("bootstrap_exercise", SessionConfig.bootstrap_exercise),
        state_file=session_data.get("state_file"),
    )

    known_keys = {"api", "workspace", "tool", "logging", "session"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(
        api=api,
        workspace=workspace,
        tool=tool,
        logging=logging_config,
        session=session,
        extra=extra,
    )


def load_config(
    project_root: str | None = None,
    config_path: Path | None = None,
    reload: bool = False,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables (TRACKDESK_TOKEN via fetch_secret, TRACKDESK_*)
    2. Explicit config file (--config)
    3. Project config ($project_root/.trackdesk/config.yaml)
    4. User config (~/.config/trackdesk/config.yaml or %APPDATA%)
    5. System config (/etc/trackdesk/ or %PROGRAMDATA%)
    6. The external tool's user.json

    Args:
        project_root: Project directory for project-level config.
        config_path: Extra YAML file layered above the cascade.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.
    """
    global _cached_config

    cacheable = project_root is None and config_path is None
    if _cached_config is not None and not reload and cacheable:
        return _cached_config

    configs: list[dict[str, Any]] = [load_tool_config()]

    paths = get_config_paths(project_root)
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        paths.append(config_path)

    for path in paths:
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    configs.append(env_overrides())

    token = fetch_secret(TOKEN_KEY)
    if token:
        configs.append({"api": {"token": token}})

    config = dict_to_config(merge_configs(*configs))

    if cacheable:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config. Useful for testing or forcing a reload."""
    global _cached_config
    _cached_config = None


def require_credentials(config: Config) -> tuple[str, Path]:
    """Return (token, workspace root) or raise ConfigError.

    Raises:
        ConfigError: If the token or workspace root is not configured.
    """
    if not config.api.token:
        raise ConfigError(
            f"No API token configured; set {TOKEN_KEY} or run the tool's configure step"
        )
    if not config.workspace.root:
        raise ConfigError("No workspace directory configured; set TRACKDESK_WORKSPACE")
    return config.api.token, Path(config.workspace.root)
