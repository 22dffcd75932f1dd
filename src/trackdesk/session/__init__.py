"""Session layer: state, selection flow and gated actions."""

from trackdesk.session.actions import (
    ACTIONS,
    ActionSpec,
    SolutionAction,
    SolutionActionDispatcher,
)
from trackdesk.session.coordinator import SessionCoordinator
from trackdesk.session.state import ExerciseContext, SessionSnapshot, SessionState
from trackdesk.session.storage import StateStore

__all__ = [
    "ACTIONS",
    "ActionSpec",
    "ExerciseContext",
    "SessionCoordinator",
    "SessionSnapshot",
    "SessionState",
    "SolutionAction",
    "SolutionActionDispatcher",
    "StateStore",
]
