"""Exception hierarchy for the AthenaQuery core.

Every error raised while assembling, gating or executing a statement derives
from :class:`AthenaQueryError`, so the REPL can report it and carry on with the
next statement without catching unrelated exceptions.
"""

from __future__ import annotations


class AthenaQueryError(Exception):
    """Base class for all AthenaQuery errors."""


class ConfigurationError(AthenaQueryError):
    """Raised at startup when scope or credentials cannot be resolved."""


class ServiceError(AthenaQueryError):
    """A remote call failed at the transport or service level.

    Attributes
    ----------
    reason:
        Human-readable description, preferring the service-reported message.
    code:
        Service error code when one was returned (e.g. ``InvalidRequestException``).
    """

    def __init__(self, reason: str, code: str | None = None) -> None:
        self.reason = reason
        self.code = code
        super().__init__(f"{code}: {reason}" if code else reason)


class _ExecutionError(AthenaQueryError):
    """Shared shape for errors tied to a single execution phase."""

    def __init__(self, reason: str, execution_id: str | None = None) -> None:
        self.reason = reason
        self.execution_id = execution_id
        super().__init__(reason)


class SubmissionError(_ExecutionError):
    """The statement could not be submitted."""


class PollError(_ExecutionError):
    """Fetching the execution status failed; the run is abandoned."""


class ResultFetchError(_ExecutionError):
    """Fetching a result page failed; rows gathered so far are discarded."""


class QueryFailedError(_ExecutionError):
    """The engine reported FAILED.  ``reason`` is the engine's own text."""


class QueryCancelledError(_ExecutionError):
    """The execution was cancelled by someone other than this client."""

    def __init__(self, execution_id: str | None = None) -> None:
        super().__init__("query was cancelled", execution_id)


class QueryTimeoutError(_ExecutionError, TimeoutError):
    """The execution did not finish within the configured poll bounds."""


class CommandSyntaxError(AthenaQueryError):
    """A meta-command was malformed."""


class UnknownCommandError(CommandSyntaxError):
    """A meta-command name was not recognised."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"unknown command '{command}', enter \".help\" for usage hints")


class PermissionDeniedError(AthenaQueryError):
    """A DDL statement was rejected because DDL is disabled for the session."""
