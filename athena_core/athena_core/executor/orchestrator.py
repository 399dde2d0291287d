"""Submit, poll and paginate a single statement to completion.

:class:`QueryOrchestrator` drives one execution handle at a time through the
remote lifecycle: submit the statement, poll its status at a constant interval
until it is terminal, then page through the results and concatenate them in
arrival order.  Failures in each phase surface as a distinct error type so
callers can tell a rejected submission from an engine-side failure.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from pydantic import BaseModel, Field

from athena_core.errors import (
    PollError,
    QueryCancelledError,
    QueryFailedError,
    QueryTimeoutError,
    ResultFetchError,
    ServiceError,
    SubmissionError,
)
from athena_core.executor.base import QueryServiceClient
from athena_core.models.execution import (
    ColumnInfo,
    ExecutionState,
    ExecutionStatus,
    QueryResult,
    QueryScope,
)

logger = logging.getLogger(__name__)


class PollConfig(BaseModel):
    """Tuneable parameters for status polling.

    With both bounds unset the loop polls until the execution is terminal.
    """

    interval_seconds: float = Field(
        default=2.0,
        gt=0.0,
        description="Constant delay between status polls.",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0.0,
        description="Wall-clock limit for the poll phase; None means unbounded.",
    )
    max_attempts: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of status polls; None means unbounded.",
    )


class QueryOrchestrator:
    """Execute statements against a :class:`QueryServiceClient`.

    Parameters
    ----------
    client:
        Remote service client.
    scope:
        Default work group, database and catalog for submitted statements.
    poll_config:
        Poll interval and optional bounds (see :class:`PollConfig`).
    """

    def __init__(
        self,
        client: QueryServiceClient,
        scope: QueryScope,
        poll_config: PollConfig | None = None,
    ) -> None:
        self._client = client
        self._scope = scope
        self._poll_config = poll_config or PollConfig()
        self._active_execution: str | None = None

    @property
    def scope(self) -> QueryScope:
        return self._scope

    def execute(
        self,
        statement: str,
        scope: QueryScope | None = None,
        on_submitted: Callable[[str], None] | None = None,
        on_succeeded: Callable[[ExecutionStatus], None] | None = None,
    ) -> QueryResult:
        """Run *statement* and return its complete result.

        *on_submitted*, when given, is called with the execution handle as soon
        as the submission is accepted, before polling starts.  *on_succeeded*
        receives the SUCCEEDED status before the first result page is fetched.

        Raises
        ------
        SubmissionError
            The service rejected the submission.
        PollError
            A status request failed.
        QueryFailedError
            The engine reported FAILED; carries the engine's reason.
        QueryCancelledError
            The execution was cancelled remotely.
        QueryTimeoutError
            A configured poll bound was exceeded.
        ResultFetchError
            A result page could not be fetched.
        """
        if self._active_execution is not None:
            raise RuntimeError(f"execution {self._active_execution} is still in flight")

        execution_id = self._submit(statement, scope or self._scope)
        self._active_execution = execution_id
        try:
            if on_submitted is not None:
                on_submitted(execution_id)
            status = self._poll_until_complete(execution_id)
            if on_succeeded is not None:
                on_succeeded(status)
            columns, rows = self._fetch_all_pages(execution_id)
        finally:
            self._active_execution = None

        return QueryResult(
            execution_id=execution_id,
            statement_type=status.statement_type,
            columns=columns,
            rows=rows,
            statistics=status.statistics,
        )

    # -- Internal helpers ----------------------------------------------------

    def _submit(self, statement: str, scope: QueryScope) -> str:
        try:
            execution_id = self._client.start_query(statement, scope)
        except ServiceError as exc:
            raise SubmissionError(str(exc)) from exc
        logger.info(
            "Submitted query %s (work group %s, database %s)",
            execution_id,
            scope.work_group,
            scope.database,
        )
        return execution_id

    def _poll_until_complete(self, execution_id: str) -> ExecutionStatus:
        """Block until the execution reaches a terminal state.

        Poll errors are not retried.  A non-terminal status is followed by a
        fixed sleep; there is no backoff.
        """
        config = self._poll_config
        deadline = time.monotonic() + config.timeout_seconds if config.timeout_seconds is not None else None
        attempts = 0

        while True:
            try:
                status = self._client.get_status(execution_id)
            except ServiceError as exc:
                raise PollError(str(exc), execution_id) from exc
            attempts += 1

            if status.state is ExecutionState.SUCCEEDED:
                logger.info("Query %s succeeded after %d poll(s)", execution_id, attempts)
                return status
            if status.state is ExecutionState.FAILED:
                reason = status.state_change_reason or "query failed"
                logger.info("Query %s failed: %s", execution_id, reason)
                raise QueryFailedError(reason, execution_id)
            if status.state is ExecutionState.CANCELLED:
                logger.info("Query %s was cancelled", execution_id)
                raise QueryCancelledError(execution_id)

            logger.debug("Query %s is %s (poll %d)", execution_id, status.state.value, attempts)

            if config.max_attempts is not None and attempts >= config.max_attempts:
                self._stop_quietly(execution_id)
                raise QueryTimeoutError(
                    f"query {execution_id} did not complete within {config.max_attempts} status polls",
                    execution_id,
                )
            if deadline is not None and time.monotonic() >= deadline:
                self._stop_quietly(execution_id)
                raise QueryTimeoutError(
                    f"query {execution_id} did not complete within {config.timeout_seconds}s",
                    execution_id,
                )

            time.sleep(config.interval_seconds)

    def _stop_quietly(self, execution_id: str) -> None:
        logger.error("Query %s exceeded its poll bounds, requesting stop", execution_id)
        try:
            self._client.stop_query(execution_id)
        except ServiceError:
            logger.warning("Failed to stop timed-out query %s", execution_id)

    def _fetch_all_pages(self, execution_id: str) -> tuple[list[ColumnInfo], list[list[str | None]]]:
        """Concatenate every result page in arrival order."""
        columns: list[ColumnInfo] = []
        rows: list[list[str | None]] = []
        next_token: str | None = None
        pages = 0

        while True:
            try:
                page = self._client.get_results_page(execution_id, next_token)
            except ServiceError as exc:
                raise ResultFetchError(str(exc), execution_id) from exc

            if pages == 0:
                columns = list(page.columns)
            rows.extend(page.rows)
            pages += 1

            if page.next_token is None:
                break
            next_token = page.next_token

        logger.debug("Fetched %d row(s) in %d page(s) for query %s", len(rows), pages, execution_id)
        return columns, rows
