"""Subprocess-based executor for the external command-line tool."""

from __future__ import annotations

import asyncio
import os
import time

from trackdesk.logging import get_logger
from trackdesk.terminal.result import ERROR_PREFIX, ToolOutput

log = get_logger("terminal")


class SubprocessCommandExecutor:
    """Execute commands using asyncio subprocess.

    Launch failures (missing binary, permissions, timeout) are reported as
    output starting with ``Error:`` so that callers classify them the same
    way as errors printed by the tool itself.
    """

    def __init__(self, default_cwd: str = ".") -> None:
        """Initialize the subprocess executor.

        Args:
            default_cwd: Default working directory for commands.
        """
        self._default_cwd = default_cwd

    async def execute(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = 300.0,
        output_limit: int = 200000,
    ) -> ToolOutput:
        """Execute a command using asyncio subprocess.

        Args:
            command: The command to execute.
            args: Optional list of arguments.
            cwd: Working directory. Uses default_cwd if None.
            env: Additional environment variables.
            timeout: Timeout in seconds. None for no timeout.
            output_limit: Maximum characters of output to capture.

        Returns:
            ToolOutput with execution details.
        """
        start_time = time.perf_counter()

        cmd_list = [command]
        if args:
            cmd_list.extend(args)
        full_command = " ".join(cmd_list)

        working_dir = cwd or self._default_cwd

        process_env = os.environ.copy()
        if env:
            process_env.update(env)

        def failure(message: str, exit_code: int | None) -> ToolOutput:
            return ToolOutput(
                command=full_command,
                exit_code=exit_code,
                output=f"{ERROR_PREFIX} {message}",
                truncated=False,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        log.debug("Running %s in %s", full_command, working_dir)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd_list,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,  # Merge stderr into stdout
                cwd=working_dir,
                env=process_env,
            )
        except FileNotFoundError:
            # Raised for a missing cwd as well as a missing binary
            if not os.path.isdir(working_dir):
                return failure(f"working directory does not exist: {working_dir}", 1)
            return failure(f"command not found: {command}", 127)
        except PermissionError:
            return failure(f"permission denied: {command}", 126)
        except OSError as e:
            return failure(f"could not start {command}: {e}", 1)

        try:
            if timeout is not None:
                stdout_data, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
            else:
                stdout_data, _ = await process.communicate()
        except asyncio.TimeoutError:
            try:
                process.kill()
                await process.wait()
            except ProcessLookupError:
                pass  # Process already gone
            return failure(f"{full_command} timed out after {timeout}s", None)

        output = stdout_data.decode("utf-8", errors="replace")
        truncated = len(output) > output_limit
        if truncated:
            output = output[:output_limit] + "\n... (output truncated)"

        result = ToolOutput(
            command=full_command,
            exit_code=process.returncode,
            output=output,
            truncated=truncated,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        log.debug("%s finished: %r", full_command, result)
        return result
