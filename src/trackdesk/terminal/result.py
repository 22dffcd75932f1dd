"""Tool invocation result and the output classification rule."""

from __future__ import annotations

from dataclasses import dataclass

from trackdesk.errors import ToolError
from trackdesk.result import Err, Ok

# Contract with the external tool: failures are reported on stdout with this prefix
ERROR_PREFIX = "Error:"


def classify_output(output: str) -> Ok[str] | Err:
    """Classify captured tool output as success or failure.

    Any text beginning with the literal ``Error:`` is a failure; anything
    else, including the empty string, is success content.
    """
    if output.startswith(ERROR_PREFIX):
        return Err(ToolError(output))
    return Ok(output)


@dataclass
class ToolOutput:
    """Captured output of one external tool invocation.

    Attributes:
        command: The command that was executed (including args).
        exit_code: Process exit code, or None if killed/timeout. Recorded
            for logging only; classification uses the output text.
        output: Combined stdout/stderr output (may be truncated).
        truncated: True if output was truncated due to output_limit.
        duration_ms: Execution duration in milliseconds.
    """

    command: str
    exit_code: int | None
    output: str
    truncated: bool
    duration_ms: float

    @property
    def failed(self) -> bool:
        """True if the output carries the tool's error prefix."""
        return classify_output(self.output).is_err()

    def classify(self) -> Ok[str] | Err:
        return classify_output(self.output)

    def __repr__(self) -> str:
        """Concise repr for logs."""
        if self.failed:
            return f"<ToolOutput error, exit={self.exit_code}>"
        lines = self.output.count("\n") + 1 if self.output else 0
        return f"<ToolOutput ok, {lines} lines>"
