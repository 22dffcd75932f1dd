"""Executor protocol for running the external command-line tool."""

from __future__ import annotations

from typing import Protocol

from trackdesk.terminal.result import ToolOutput


class CommandExecutor(Protocol):
    """Protocol for executing a command and capturing its output.

    Implementations:
    - SubprocessCommandExecutor: Local asyncio subprocess execution
    """

    async def execute(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = 300.0,
        output_limit: int = 200000,
    ) -> ToolOutput:
        """Execute a command.

        Args:
            command: The program to execute (e.g., "exercism").
            args: Optional list of arguments (e.g., ["download", "--track=rust"]).
            cwd: Working directory. If None, uses executor's default.
            env: Additional environment variables to set.
            timeout: Timeout in seconds. None means no timeout.
            output_limit: Maximum characters of output to capture.

        Returns:
            ToolOutput with exit code and captured output.
        """
        ...
