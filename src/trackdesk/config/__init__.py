"""Configuration management for trackdesk.

Provides hierarchical YAML-based configuration with:
- The external tool's user.json as the lowest layer
- System-level config (/etc/trackdesk/ or %PROGRAMDATA%)
- User-level config (~/.config/trackdesk/ or %APPDATA%)
- Project-level config ($project_root/.trackdesk/)
- Environment variable overrides (highest priority)

Example usage:
    from trackdesk.config import load_config, require_credentials

    config = load_config()
    token, workspace = require_credentials(config)
"""

from trackdesk.config.loader import (
    deep_merge,
    get_config,
    load_config,
    merge_configs,
    require_credentials,
    reset_config,
)
from trackdesk.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_state_path,
    get_system_config_path,
    get_tool_config_path,
    get_user_config_path,
)
from trackdesk.config.schema import (
    ApiConfig,
    Config,
    LoggingConfig,
    SessionConfig,
    ToolConfig,
    WorkspaceConfig,
)
from trackdesk.config.secrets import clear_secret_cache, fetch_secret

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "require_credentials",
    "deep_merge",
    "merge_configs",
    # Schema types
    "ApiConfig",
    "WorkspaceConfig",
    "ToolConfig",
    "LoggingConfig",
    "SessionConfig",
    # Secret management
    "fetch_secret",
    "clear_secret_cache",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
    "get_state_path",
    "get_tool_config_path",
]
