"""In-memory stand-in for the remote query service.

:class:`FakeQueryService` satisfies :class:`QueryServiceClient` without any
network access.  Each statement is registered up front with the sequence of
states its polls should return and the result pages it should serve, so
orchestrator, schema dump and shell behaviour can be exercised
deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from athena_core.errors import ServiceError
from athena_core.models.execution import (
    ColumnInfo,
    ExecutionState,
    ExecutionStatus,
    QueryScope,
    QueryStatistics,
    ResultPage,
    StatementType,
)


@dataclass
class ScriptedQuery:
    """Behaviour of one registered statement."""

    states: list[ExecutionState]
    pages: list[list[list[str | None]]]
    columns: list[ColumnInfo]
    statement_type: StatementType = StatementType.DML
    reason: str | None = None
    statistics: QueryStatistics | None = None
    submit_error: ServiceError | None = None
    poll_error: ServiceError | None = None
    fetch_error_on_page: int | None = None


@dataclass
class _Execution:
    query: ScriptedQuery
    polls: int = 0


@dataclass
class FakeQueryService:
    """Scripted implementation of the query service client protocol."""

    queries: dict[str, ScriptedQuery] = field(default_factory=dict)
    submitted: list[tuple[str, QueryScope]] = field(default_factory=list)
    status_calls: list[str] = field(default_factory=list)
    page_requests: list[tuple[str, str | None]] = field(default_factory=list)
    stopped: list[str] = field(default_factory=list)
    _executions: dict[str, _Execution] = field(default_factory=dict)

    def add_query(
        self,
        sql: str,
        pages: list[list[list[str | None]]] | None = None,
        *,
        columns: list[str] | None = None,
        states: list[ExecutionState] | None = None,
        statement_type: StatementType = StatementType.DML,
        reason: str | None = None,
        statistics: QueryStatistics | None = None,
        submit_error: ServiceError | None = None,
        poll_error: ServiceError | None = None,
        fetch_error_on_page: int | None = None,
    ) -> ScriptedQuery:
        """Register how *sql* behaves.

        *states* is consumed one entry per poll; the last entry repeats.
        *pages* are served in order with continuation tokens between them.
        """
        scripted = ScriptedQuery(
            states=states or [ExecutionState.SUCCEEDED],
            pages=pages if pages is not None else [[]],
            columns=[ColumnInfo(name=name) for name in (columns or [])],
            statement_type=statement_type,
            reason=reason,
            statistics=statistics,
            submit_error=submit_error,
            poll_error=poll_error,
            fetch_error_on_page=fetch_error_on_page,
        )
        self.queries[sql] = scripted
        return scripted

    # -- QueryServiceClient ----------------------------------------------------

    def start_query(self, sql: str, scope: QueryScope) -> str:
        self.submitted.append((sql, scope))
        scripted = self.queries.get(sql)
        if scripted is None:
            raise ServiceError(f"no scripted behaviour for statement: {sql}", code="InvalidRequestException")
        if scripted.submit_error is not None:
            raise scripted.submit_error
        execution_id = f"exec-{len(self.submitted)}"
        self._executions[execution_id] = _Execution(query=scripted)
        return execution_id

    def get_status(self, execution_id: str) -> ExecutionStatus:
        self.status_calls.append(execution_id)
        execution = self._executions[execution_id]
        scripted = execution.query
        if scripted.poll_error is not None:
            raise scripted.poll_error

        state = scripted.states[min(execution.polls, len(scripted.states) - 1)]
        execution.polls += 1
        return ExecutionStatus(
            execution_id=execution_id,
            state=state,
            statement_type=scripted.statement_type,
            state_change_reason=scripted.reason if state is ExecutionState.FAILED else None,
            statistics=scripted.statistics if state is ExecutionState.SUCCEEDED else None,
        )

    def get_results_page(self, execution_id: str, next_token: str | None = None) -> ResultPage:
        self.page_requests.append((execution_id, next_token))
        scripted = self._executions[execution_id].query
        index = 0 if next_token is None else int(next_token.rsplit("-", 1)[1])
        if scripted.fetch_error_on_page == index:
            raise ServiceError("Rate exceeded", code="ThrottlingException")

        is_last = index == len(scripted.pages) - 1
        return ResultPage(
            rows=scripted.pages[index],
            columns=scripted.columns,
            next_token=None if is_last else f"token-{index + 1}",
        )

    def stop_query(self, execution_id: str) -> None:
        self.stopped.append(execution_id)
