"""Shared test doubles for trackdesk tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import httpx

from trackdesk.remote.client import RemoteCatalogClient
from trackdesk.terminal.result import ToolOutput
from trackdesk.ui.panes import Buffer
from trackdesk.ui.protocol import Choice

BASE_URL = "https://practice.test/api/v2"


def write_exercise(
    root: Path,
    track: str,
    exercise: str,
    *,
    exercise_id: str = "42",
    files: dict[str, list[str]] | None = None,
    metadata: bool = True,
    manifest: bool = True,
    readme: str | None = "# Exercise\n",
) -> Path:
    """Create an exercise directory the way the tool lays it out."""
    if files is None:
        files = {"solution": [f"{exercise}.py"], "test": [f"{exercise}_test.py"]}

    exercise_dir = root / track / exercise
    hidden = exercise_dir / ".exercism"
    hidden.mkdir(parents=True, exist_ok=True)

    if metadata:
        (hidden / "metadata.json").write_text(json.dumps({
            "track": track,
            "exercise": exercise,
            "id": exercise_id,
            "url": f"https://practice.test/tracks/{track}/exercises/{exercise}",
            "handle": "someone",
            "is_requester": True,
        }))
    if manifest:
        (hidden / "config.json").write_text(json.dumps({"files": files}))
    for paths in files.values():
        for relative in paths:
            target = exercise_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(f"# {relative}\n")
    if readme is not None:
        (exercise_dir / "README.md").write_text(readme)
    return exercise_dir


class FakeExecutor:
    """CommandExecutor double that records argv and returns canned output.

    ``respond`` receives the argument list and returns the output text. By
    default a ``download`` writes a complete exercise under ``root``.
    """

    def __init__(
        self,
        root: Path | None = None,
        respond: Callable[[list[str]], str] | None = None,
    ) -> None:
        self.root = root
        self.calls: list[tuple[str, list[str], str | None]] = []
        self._respond = respond or self._default_respond

    @property
    def argvs(self) -> list[list[str]]:
        return [args for _, args, _ in self.calls]

    def _default_respond(self, args: list[str]) -> str:
        if args and args[0] == "download" and self.root is not None:
            options = dict(a[2:].split("=", 1) for a in args[1:] if "=" in a)
            path = write_exercise(self.root, options["track"], options["exercise"])
            return f"\nDownloaded to\n{path}\n"
        return ""

    async def execute(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = 300.0,
        output_limit: int = 200000,
    ) -> ToolOutput:
        args = list(args or [])
        self.calls.append((command, args, cwd))
        output = self._respond(args)
        return ToolOutput(
            command=" ".join([command, *args]),
            exit_code=1 if output.startswith("Error:") else 0,
            output=output,
            truncated=False,
            duration_ms=1.0,
        )


class RecordingHost:
    """WindowHost double; windows are (generation, pane-name) tuples."""

    def __init__(self) -> None:
        self.generation = 0
        self.layouts = 0
        self.displayed: list[tuple[Any, Buffer]] = []
        self.defaults: list[Buffer] = []
        self.messages: list[tuple[str, str]] = []

    def reset_layout(self) -> tuple[Any, Any, Any]:
        self.generation += 1
        self.layouts += 1
        g = self.generation
        return (g, "description"), (g, "result"), (g, "code")

    def display(self, window: Any, buffer: Buffer) -> None:
        self.displayed.append((window, buffer))

    def is_live(self, window: Any) -> bool:
        return window[0] == self.generation

    def display_default(self, buffer: Buffer) -> None:
        self.defaults.append(buffer)

    def message(self, text: str, level: str = "info") -> None:
        self.messages.append((text, level))

    def shown_in(self, pane: str) -> list[Buffer]:
        return [buffer for window, buffer in self.displayed if window[1] == pane]

    def errors(self) -> list[str]:
        return [text for text, level in self.messages if level == "error"]


class ScriptedPrompter:
    """Prompter double that answers from a queue and records what it saw."""

    def __init__(self, *answers: str | None) -> None:
        self.answers = list(answers)
        self.prompts: list[tuple[str, list[Choice]]] = []

    async def choose(self, prompt: str, choices: Sequence[Choice]) -> str | None:
        self.prompts.append((prompt, list(choices)))
        return self.answers.pop(0) if self.answers else None


class FakeService:
    """In-memory practice service routed through httpx.MockTransport."""

    def __init__(
        self,
        tracks: Sequence[str] = ("python", "rust"),
        exercises: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.tracks = list(tracks)
        self.exercises = exercises or {}
        self.requests: list[httpx.Request] = []
        self.fail_with: tuple[int, Any] | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            status, body = self.fail_with
            if isinstance(body, (dict, list)):
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=body)

        path = request.url.path.removeprefix("/api/v2/")
        parts = path.split("/")
        if request.method == "GET" and parts == ["tracks"]:
            return httpx.Response(200, json={"tracks": [{"slug": s, "title": s.title()} for s in self.tracks]})
        if request.method == "GET" and len(parts) == 3 and parts[0] == "tracks" and parts[2] == "exercises":
            if parts[1] not in self.exercises:
                return httpx.Response(404, json={"error": {"type": "track_not_found", "message": "Track not found"}})
            return httpx.Response(200, json={"exercises": self.exercises[parts[1]]})
        if request.method == "PATCH" and parts[0] == "solutions":
            return httpx.Response(200, json={"solution": {"id": parts[1]}})
        return httpx.Response(404, json={"error": {"message": f"no route for {path}"}})

    def client(self, token: str | None = "secret-token") -> RemoteCatalogClient:
        transport = httpx.MockTransport(self.handler)
        return RemoteCatalogClient(BASE_URL, token, client=httpx.AsyncClient(transport=transport))

    def patches(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PATCH"]
