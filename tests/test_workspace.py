"""Tests for the local workspace cache and exercise files."""

from __future__ import annotations

import json

import pytest

from tests.utils import FakeExecutor, write_exercise
from trackdesk.errors import PreconditionError, ToolError
from trackdesk.result import Err, Ok
from trackdesk.terminal.runner import CommandRunner
from trackdesk.workspace.cache import LocalWorkspaceCache
from trackdesk.workspace.files import (
    ExerciseFileManifest,
    ExerciseMetadata,
    read_manifest,
    read_metadata,
)


class TestExerciseFiles:
    def test_read_both(self, workspace):
        exercise_dir = write_exercise(
            workspace, "rust", "two-fer",
            files={"solution": ["src/lib.rs"], "test": ["tests/two-fer.rs"], "example": [".meta/example.rs"]},
        )
        metadata = read_metadata(exercise_dir)
        manifest = read_manifest(exercise_dir)
        assert metadata == ExerciseMetadata(
            id="42", track="rust", exercise="two-fer",
            url="https://practice.test/tracks/rust/exercises/two-fer",
        )
        assert manifest.solution == ("src/lib.rs",)
        assert manifest.test == ("tests/two-fer.rs",)
        assert manifest.paths("example") == (".meta/example.rs",)

    def test_absent_files_yield_none(self, workspace):
        exercise_dir = workspace / "rust" / "empty"
        exercise_dir.mkdir(parents=True)
        assert read_metadata(exercise_dir) is None
        assert read_manifest(exercise_dir) is None

    def test_malformed_files_yield_none(self, workspace):
        exercise_dir = write_exercise(workspace, "rust", "broken")
        (exercise_dir / ".exercism" / "metadata.json").write_text("{not json")
        (exercise_dir / ".exercism" / "config.json").write_text(json.dumps({"files": ["a", "b"]}))
        assert read_metadata(exercise_dir) is None
        assert read_manifest(exercise_dir) is None

    def test_metadata_missing_field(self, workspace):
        exercise_dir = write_exercise(workspace, "rust", "partial")
        (exercise_dir / ".exercism" / "metadata.json").write_text(json.dumps({"track": "rust"}))
        assert read_metadata(exercise_dir) is None

    @pytest.mark.parametrize("exercise_id", [None, ""])
    def test_metadata_without_usable_id(self, workspace, exercise_id):
        exercise_dir = write_exercise(workspace, "rust", "anonymous")
        (exercise_dir / ".exercism" / "metadata.json").write_text(
            json.dumps({"id": exercise_id, "track": "rust", "exercise": "anonymous"})
        )
        assert read_metadata(exercise_dir) is None

    def test_first_of_missing_role_is_precondition_error(self):
        manifest = ExerciseFileManifest(files={"solution": ("a.py",), "test": ()})
        assert manifest.first("solution") == Ok("a.py")
        result = manifest.first("test")
        assert isinstance(result, Err)
        assert isinstance(result.error, PreconditionError)
        assert isinstance(manifest.first("editor"), Err)


class TestEnsureDownloaded:
    def test_resolve_is_pure(self, cache, workspace):
        assert cache.resolve_exercise_dir("rust", "two-fer") == workspace / "rust" / "two-fer"
        assert not (workspace / "rust").exists()

    @pytest.mark.asyncio
    async def test_cache_hit_skips_tool(self, cache, executor, workspace):
        exercise_dir = write_exercise(workspace, "rust", "two-fer")
        result = await cache.ensure_downloaded("rust", "two-fer")
        assert result == Ok(exercise_dir)
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_force_always_downloads(self, cache, executor, workspace):
        write_exercise(workspace, "rust", "two-fer")
        result = await cache.ensure_downloaded("rust", "two-fer", force=True)
        assert result.is_ok()
        assert executor.argvs == [["download", "--track=rust", "--exercise=two-fer", "--force"]]

    @pytest.mark.asyncio
    async def test_missing_dir_downloads(self, cache, executor, workspace):
        result = await cache.ensure_downloaded("rust", "bob")
        assert result == Ok(workspace / "rust" / "bob")
        assert len(executor.calls) == 1

    @pytest.mark.asyncio
    async def test_tool_error_propagates(self, workspace):
        executor = FakeExecutor(respond=lambda args: "Error: network timeout")
        cache = LocalWorkspaceCache(workspace, CommandRunner(executor))
        result = await cache.ensure_downloaded("rust", "bob")
        assert isinstance(result, Err)
        assert isinstance(result.error, ToolError)
        assert result.message == "Error: network timeout"

    @pytest.mark.asyncio
    async def test_success_without_directory_is_error(self, workspace):
        executor = FakeExecutor(respond=lambda args: "nothing happened")
        cache = LocalWorkspaceCache(workspace, CommandRunner(executor))
        result = await cache.ensure_downloaded("rust", "bob")
        assert isinstance(result, Err)


class TestSetupExercise:
    @pytest.mark.asyncio
    async def test_success_sets_pair(self, cache, state, workspace):
        result = await cache.setup_exercise(state, "rust", "two-fer")
        assert isinstance(result, Ok)
        assert state.exercise is result.value
        assert state.exercise.metadata.exercise == "two-fer"
        assert state.exercise.manifest.solution == ("two-fer.py",)
        assert state.exercise.directory == workspace / "rust" / "two-fer"

    @pytest.mark.asyncio
    async def test_failure_clears_pair(self, state, workspace):
        ok_cache = LocalWorkspaceCache(workspace, CommandRunner(FakeExecutor(root=workspace)))
        await ok_cache.setup_exercise(state, "rust", "two-fer")
        assert state.exercise is not None

        failing = LocalWorkspaceCache(
            workspace, CommandRunner(FakeExecutor(respond=lambda args: "Error: no such exercise"))
        )
        result = await failing.setup_exercise(state, "rust", "nope")
        assert isinstance(result, Err)
        assert state.exercise is None

    @pytest.mark.asyncio
    async def test_replaces_pair_wholesale(self, cache, state):
        await cache.setup_exercise(state, "rust", "two-fer")
        first = state.exercise
        await cache.setup_exercise(state, "rust", "bob")
        assert state.exercise is not first
        assert state.exercise.metadata.exercise == "bob"
        assert state.exercise.manifest.solution == ("bob.py",)

    @pytest.mark.asyncio
    async def test_incomplete_cache_is_downloaded_again(self, cache, state, executor, workspace):
        write_exercise(workspace, "rust", "two-fer", manifest=False)
        result = await cache.setup_exercise(state, "rust", "two-fer")
        assert result.is_ok()
        assert executor.argvs == [["download", "--track=rust", "--exercise=two-fer", "--force"]]
        assert state.exercise is not None

    @pytest.mark.asyncio
    async def test_incomplete_after_redownload_fails_cleanly(self, state, workspace):
        write_exercise(workspace, "rust", "two-fer", metadata=False)
        executor = FakeExecutor(respond=lambda args: "")
        cache = LocalWorkspaceCache(workspace, CommandRunner(executor))
        result = await cache.setup_exercise(state, "rust", "two-fer")
        assert isinstance(result, Err)
        assert state.exercise is None
        assert len(executor.calls) == 1
