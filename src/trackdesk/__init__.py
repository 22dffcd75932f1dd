"""trackdesk: session orchestration for coding-exercise practice tracks."""

__version__ = "0.1.0"

# Public API
from trackdesk.config import Config, get_config, load_config
from trackdesk.errors import (
    ConfigError,
    PreconditionError,
    ToolError,
    TrackdeskError,
    TransportError,
)
from trackdesk.result import Err, Ok, Result
from trackdesk.session import SessionCoordinator, SessionState, SolutionAction

__all__ = [
    # Orchestration
    "SessionCoordinator",
    "SessionState",
    "SolutionAction",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Results and errors
    "Ok",
    "Err",
    "Result",
    "TrackdeskError",
    "TransportError",
    "ToolError",
    "PreconditionError",
    "ConfigError",
]
