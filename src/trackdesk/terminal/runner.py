"""High-level wrapper over the external tool's sub-commands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from trackdesk.logging import get_logger
from trackdesk.result import Err, Ok
from trackdesk.terminal.protocol import CommandExecutor
from trackdesk.terminal.result import ToolOutput

log = get_logger("terminal")


class CommandRunner:
    """Builds argv for download/test/submit/configure and classifies output.

    Holds no concurrency control of its own: each call suspends its caller
    until the process finishes.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        command: str = "exercism",
        timeout: float | None = 300.0,
    ) -> None:
        self._executor = executor
        self._command = command
        self._timeout = timeout

    @property
    def command(self) -> str:
        return self._command

    async def run(self, argv: Sequence[str], cwd: Path | str | None = None) -> ToolOutput:
        """Run the tool with ``argv`` and return its raw output."""
        return await self._executor.execute(
            self._command,
            args=list(argv),
            cwd=str(cwd) if cwd is not None else None,
            timeout=self._timeout,
        )

    async def _run_classified(
        self, argv: Sequence[str], cwd: Path | str | None = None
    ) -> Ok[str] | Err:
        output = await self.run(argv, cwd=cwd)
        result = output.classify()
        if result.is_err():
            log.warning("%s failed: %s", output.command, output.output.strip())
        return result

    async def download(self, track: str, exercise: str, force: bool = True) -> Ok[str] | Err:
        argv = ["download", f"--track={track}", f"--exercise={exercise}"]
        if force:
            argv.append("--force")
        return await self._run_classified(argv)

    async def test(self, exercise_dir: Path | str) -> Ok[str] | Err:
        return await self._run_classified(["test"], cwd=exercise_dir)

    async def submit(
        self, exercise_dir: Path | str, files: Sequence[str] = ()
    ) -> Ok[str] | Err:
        return await self._run_classified(["submit", *files], cwd=exercise_dir)

    async def configure(self, token: str, workspace: Path | str) -> Ok[str] | Err:
        return await self._run_classified([
            "configure",
            f"--token={token}",
            f"--workspace={workspace}",
        ])
