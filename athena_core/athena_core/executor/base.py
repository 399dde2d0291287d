"""Abstract interface for the remote query service.

The orchestrator only talks to the service through :class:`QueryServiceClient`,
so the Athena implementation can be replaced by an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol

from athena_core.models.execution import ExecutionStatus, QueryScope, ResultPage


class QueryServiceClient(Protocol):
    """Structural interface for a poll-based SQL service.

    Implementations are **not** required to subclass this protocol; they only
    need to expose methods with matching signatures (duck typing).  Every
    method raises :class:`~athena_core.errors.ServiceError` when the remote
    call fails.
    """

    def start_query(self, sql: str, scope: QueryScope) -> str:
        """Submit *sql* and return the execution handle."""
        ...

    def get_status(self, execution_id: str) -> ExecutionStatus:
        """Return the current status of *execution_id*."""
        ...

    def get_results_page(self, execution_id: str, next_token: str | None = None) -> ResultPage:
        """Fetch one page of results.

        Parameters
        ----------
        execution_id:
            Handle returned by :meth:`start_query`.
        next_token:
            Continuation token from the previous page, ``None`` for the first.
        """
        ...

    def stop_query(self, execution_id: str) -> None:
        """Request that a running execution be stopped."""
        ...
