"""External command-line tool invocation.

The tool's textual output is the only success signal: text starting with
``Error:`` is a failure, anything else is success content.
"""

from trackdesk.terminal.protocol import CommandExecutor
from trackdesk.terminal.result import ERROR_PREFIX, ToolOutput, classify_output
from trackdesk.terminal.runner import CommandRunner
from trackdesk.terminal.subprocess_executor import SubprocessCommandExecutor

__all__ = [
    "CommandExecutor",
    "CommandRunner",
    "ERROR_PREFIX",
    "SubprocessCommandExecutor",
    "ToolOutput",
    "classify_output",
]
