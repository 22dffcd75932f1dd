"""Error taxonomy for trackdesk.

These exceptions are mostly carried inside ``Err`` results rather than
raised; see ``trackdesk.result``. ``ConfigError`` is the exception that
is raised, at startup, when credentials are required but missing.
"""

from __future__ import annotations


class TrackdeskError(Exception):
    """Base class for all trackdesk errors."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TransportError(TrackdeskError):
    """Network or HTTP failure talking to the practice service.

    Attributes:
        payload: Raw error payload from the server or transport.
        status_code: HTTP status, or None for transport-level failures.
    """

    kind = "transport"

    def __init__(self, payload: str, status_code: int | None = None) -> None:
        super().__init__(payload)
        self.payload = payload
        self.status_code = status_code


class ToolError(TrackdeskError):
    """The external command-line tool reported an ``Error:`` message."""

    kind = "tool"

    def __init__(self, output: str) -> None:
        super().__init__(output.strip())
        self.output = output


class PreconditionError(TrackdeskError):
    """An action was invoked while the session was not ready for it."""

    kind = "precondition"


class ConfigError(TrackdeskError):
    """Required local configuration is missing or unreadable."""

    kind = "config"
