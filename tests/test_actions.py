"""Tests for solution status actions."""

from __future__ import annotations

import pytest

from tests.utils import FakeService, RecordingHost
from trackdesk.errors import PreconditionError, TransportError
from trackdesk.result import Err, Ok
from trackdesk.session.actions import ACTIONS, SolutionAction, SolutionActionDispatcher
from trackdesk.session.state import SessionState
from trackdesk.workspace.files import ExerciseFileManifest, ExerciseMetadata


@pytest.fixture
def ready_state(tmp_path):
    state = SessionState(tmp_path, track="rust")
    state.set_exercise(
        ExerciseMetadata(id="42", track="rust", exercise="two-fer"),
        ExerciseFileManifest(files={"solution": ("src/lib.rs",), "test": ("tests/t.rs",)}),
        tmp_path / "rust" / "two-fer",
    )
    return state


class TestActionTable:
    def test_every_action_has_a_row(self):
        assert set(ACTIONS) == set(SolutionAction)

    def test_rows(self):
        assert {spec.endpoint for spec in ACTIONS.values()} == {"complete", "publish", "unpublish"}
        assert {spec.method for spec in ACTIONS.values()} == {"PATCH"}


class TestDispatch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", list(SolutionAction))
    async def test_precondition_without_exercise(self, tmp_path, action):
        service = FakeService()
        host = RecordingHost()
        dispatcher = SolutionActionDispatcher(SessionState(tmp_path), service.client(), status=host)

        result = await dispatcher.dispatch(action)

        assert isinstance(result, Err)
        assert isinstance(result.error, PreconditionError)
        assert result.message == "exercise not set"
        assert service.requests == []
        assert host.errors() == ["exercise not set"]

    @pytest.mark.asyncio
    async def test_publish_message(self, ready_state):
        service = FakeService()
        host = RecordingHost()
        dispatcher = SolutionActionDispatcher(ready_state, service.client(), status=host)

        result = await dispatcher.dispatch(SolutionAction.PUBLISH)

        assert result == Ok("Published rust/two-fer solution")
        assert host.messages == [("Published rust/two-fer solution", "info")]
        [request] = service.patches()
        assert request.url.path == "/api/v2/solutions/42/publish"

    @pytest.mark.asyncio
    async def test_complete_and_unpublish_messages(self, ready_state):
        dispatcher = SolutionActionDispatcher(ready_state, FakeService().client())
        assert await dispatcher.dispatch(SolutionAction.COMPLETE) == Ok("Completed rust/two-fer")
        assert await dispatcher.dispatch(SolutionAction.UNPUBLISH) == Ok("Unpublished rust/two-fer solution")

    @pytest.mark.asyncio
    async def test_server_error_message(self, ready_state):
        service = FakeService()
        service.fail_with = (422, {"error": {"type": "not_published", "message": "Solution is not published"}})
        host = RecordingHost()
        dispatcher = SolutionActionDispatcher(ready_state, service.client(), status=host)

        result = await dispatcher.dispatch(SolutionAction.UNPUBLISH)

        assert isinstance(result, Err)
        assert isinstance(result.error, TransportError)
        assert result.error.payload == "Solution is not published"
        assert host.errors() == ["Could not unpublish solution: Solution is not published"]
