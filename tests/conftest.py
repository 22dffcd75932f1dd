"""Root pytest configuration for all tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.utils import FakeExecutor, FakeService, RecordingHost, ScriptedPrompter
from trackdesk.config import clear_secret_cache, reset_config
from trackdesk.session.coordinator import SessionCoordinator
from trackdesk.session.state import SessionState
from trackdesk.session.storage import StateStore
from trackdesk.terminal.runner import CommandRunner
from trackdesk.ui.coordinator import UICoordinator
from trackdesk.workspace.cache import LocalWorkspaceCache

pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def executor(workspace: Path) -> FakeExecutor:
    return FakeExecutor(root=workspace)


@pytest.fixture
def runner(executor: FakeExecutor) -> CommandRunner:
    return CommandRunner(executor, command="exercism")


@pytest.fixture
def state(workspace: Path) -> SessionState:
    return SessionState(workspace)


@pytest.fixture
def cache(workspace: Path, runner: CommandRunner) -> LocalWorkspaceCache:
    return LocalWorkspaceCache(workspace, runner)


@pytest.fixture
def service() -> FakeService:
    return FakeService(
        exercises={
            "rust": [
                {"slug": "hello-world", "difficulty": "easy", "blurb": "Say hi"},
                {"slug": "two-fer", "difficulty": "easy", "blurb": "One for you"},
                {"slug": "macros", "difficulty": "hard", "blurb": ""},
            ],
        }
    )


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def store(tmp_path: Path) -> StateStore:
    return StateStore(tmp_path / "state" / "state.yaml")


@pytest.fixture
async def coordinator(state, cache, service, runner, prompter, host, store):
    opened: list[str] = []
    coordinator = SessionCoordinator(
        state=state,
        cache=cache,
        client=service.client(),
        runner=runner,
        prompter=prompter,
        ui=UICoordinator(host),
        store=store,
        token="secret-token",
        open_url=opened.append,
    )
    coordinator.opened_urls = opened  # type: ignore[attr-defined]
    yield coordinator
    await coordinator.client._client.aclose()


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config source at an empty temp directory."""
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("EXERCISM_CONFIG_HOME", str(tmp_path / "tool"))
    for name in ("TRACKDESK_TOKEN", "TRACKDESK_WORKSPACE", "TRACKDESK_API_URL", "TRACKDESK_TOOL", "TRACKDESK_LOG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_secret_cache()
    reset_config()
    yield config_home
    clear_secret_cache()
    reset_config()
