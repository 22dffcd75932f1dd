"""Solution status actions: complete, publish, unpublish.

Each action is a row in a static table; adding an action means adding a
row, not a branch.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from trackdesk.errors import TrackdeskError, TransportError
from trackdesk.logging import get_logger
from trackdesk.result import Err, Ok

if TYPE_CHECKING:
    from trackdesk.remote.client import RemoteCatalogClient
    from trackdesk.session.state import SessionState
    from trackdesk.ui.protocol import StatusSink

log = get_logger("session")


class SolutionAction(Enum):
    """Status changes that can be applied to the current solution."""

    COMPLETE = "complete"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"


@dataclass(frozen=True, slots=True)
class ActionSpec:
    """Endpoint, method and message templates for one action.

    Templates are formatted with ``track``, ``exercise`` and ``error``.
    """

    endpoint: str
    method: str
    success_template: str
    error_template: str


ACTIONS: Mapping[SolutionAction, ActionSpec] = {
    SolutionAction.COMPLETE: ActionSpec(
        endpoint="complete",
        method="PATCH",
        success_template="Completed {track}/{exercise}",
        error_template="Could not complete exercise: {error}",
    ),
    SolutionAction.PUBLISH: ActionSpec(
        endpoint="publish",
        method="PATCH",
        success_template="Published {track}/{exercise} solution",
        error_template="Could not publish solution: {error}",
    ),
    SolutionAction.UNPUBLISH: ActionSpec(
        endpoint="unpublish",
        method="PATCH",
        success_template="Unpublished {track}/{exercise} solution",
        error_template="Could not unpublish solution: {error}",
    ),
}


class SolutionActionDispatcher:
    """Applies a SolutionAction to the session's current exercise."""

    def __init__(
        self,
        state: SessionState,
        client: RemoteCatalogClient,
        status: StatusSink | None = None,
    ) -> None:
        self._state = state
        self._client = client
        self._status = status

    async def dispatch(self, action: SolutionAction) -> Ok[str] | Err:
        """Send the action for the current exercise.

        Returns:
            Ok(message) after the server accepted the change, or Err with a
            PreconditionError (no network call made) or TransportError.
        """
        spec = ACTIONS[action]

        required = self._state.require_exercise()
        if isinstance(required, Err):
            self._report_error(required.error)
            return required
        metadata = required.value.metadata

        result = await self._client.set_solution_status(
            metadata.id, spec.endpoint, method=spec.method
        )
        if isinstance(result, Err):
            message = spec.error_template.format(
                track=metadata.track, exercise=metadata.exercise, error=result.message
            )
            self._report_error(TransportError(message, getattr(result.error, "status_code", None)))
            return result

        message = spec.success_template.format(track=metadata.track, exercise=metadata.exercise)
        log.info(message)
        if self._status is not None:
            self._status.message(message, "info")
        return Ok(message)

    def _report_error(self, error: TrackdeskError) -> None:
        log.warning("%s", error.message)
        if self._status is not None:
            self._status.message(error.message, "error")
