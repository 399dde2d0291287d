"""Amazon Athena implementation of :class:`QueryServiceClient`.

Wraps the ``boto3`` Athena client, translating raw API responses into the
engine's pydantic models and every ``botocore`` failure into a
:class:`~athena_core.errors.ServiceError` whose reason prefers the message the
service returned over the generic transport text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from athena_core.errors import ConfigurationError, ServiceError
from athena_core.models.execution import (
    ColumnInfo,
    ExecutionState,
    ExecutionStatus,
    QueryScope,
    QueryStatistics,
    ResultPage,
    StatementType,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error extraction
# ---------------------------------------------------------------------------


def describe_service_error(exc: Exception) -> ServiceError:
    """Build a :class:`ServiceError` from a ``botocore`` exception.

    ``ClientError`` carries the structured error the service returned; Athena
    adds an ``AthenaErrorCode`` to ``InvalidRequestException``.  Anything else
    falls back to the exception's own message.
    """
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code")
        message = error.get("Message") or str(exc)
        athena_code = exc.response.get("AthenaErrorCode")
        if athena_code:
            message = f"{message} ({athena_code})"
        return ServiceError(message, code=code)
    return ServiceError(str(exc))


def _call(fn: Callable[..., dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
    try:
        return fn(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        raise describe_service_error(exc) from exc


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------


def _parse_statistics(raw: dict[str, Any] | None) -> QueryStatistics | None:
    if not raw:
        return None
    return QueryStatistics(
        data_scanned_bytes=raw.get("DataScannedInBytes"),
        engine_execution_time_ms=raw.get("EngineExecutionTimeInMillis"),
        total_execution_time_ms=raw.get("TotalExecutionTimeInMillis"),
        queue_time_ms=raw.get("QueryQueueTimeInMillis"),
    )


def parse_execution(response: dict[str, Any]) -> ExecutionStatus:
    """Translate a ``GetQueryExecution`` response into :class:`ExecutionStatus`.

    Raises
    ------
    ServiceError
        If the response carries a state this client does not know.
    """
    execution = response["QueryExecution"]
    status = execution.get("Status", {})
    raw_state = status.get("State", ExecutionState.QUEUED.value)
    try:
        state = ExecutionState(raw_state)
    except ValueError as exc:
        raise ServiceError(f"unexpected execution state '{raw_state}'") from exc
    return ExecutionStatus(
        execution_id=execution["QueryExecutionId"],
        state=state,
        statement_type=StatementType.parse(execution.get("StatementType")),
        state_change_reason=status.get("StateChangeReason"),
        statistics=_parse_statistics(execution.get("Statistics")) if state is ExecutionState.SUCCEEDED else None,
    )


def parse_results_page(response: dict[str, Any]) -> ResultPage:
    """Translate a ``GetQueryResults`` response into :class:`ResultPage`."""
    result_set = response.get("ResultSet", {})
    rows = [[datum.get("VarCharValue") for datum in row.get("Data", [])] for row in result_set.get("Rows", [])]
    columns = [
        ColumnInfo(
            name=col.get("Name", ""),
            type=col.get("Type", "varchar"),
            nullable=col.get("Nullable"),
        )
        for col in result_set.get("ResultSetMetadata", {}).get("ColumnInfo", [])
    ]
    return ResultPage(rows=rows, columns=columns, next_token=response.get("NextToken"))


# ---------------------------------------------------------------------------
# AthenaClient
# ---------------------------------------------------------------------------


class AthenaClient:
    """Submit, poll and page through Athena query executions.

    Parameters
    ----------
    session:
        ``boto3`` session carrying credentials and region.  A default session
        is created when omitted.

    Raises
    ------
    ConfigurationError
        If botocore cannot build the client, e.g. when no region is configured.
    """

    def __init__(self, session: boto3.Session | None = None) -> None:
        self._session = session or boto3.Session()
        try:
            self._client = self._session.client("athena")
        except BotoCoreError as exc:
            raise ConfigurationError(f"could not create Athena client: {describe_service_error(exc)}") from exc

    def start_query(self, sql: str, scope: QueryScope) -> str:
        """Submit *sql* within *scope* and return the ``QueryExecutionId``."""
        request: dict[str, Any] = {
            "QueryString": sql,
            "WorkGroup": scope.work_group,
            "QueryExecutionContext": {
                "Database": scope.database,
                "Catalog": scope.catalog,
            },
        }
        if scope.output_location:
            request["ResultConfiguration"] = {"OutputLocation": scope.output_location}
        response = _call(self._client.start_query_execution, **request)
        return str(response["QueryExecutionId"])

    def get_status(self, execution_id: str) -> ExecutionStatus:
        response = _call(self._client.get_query_execution, QueryExecutionId=execution_id)
        return parse_execution(response)

    def get_results_page(self, execution_id: str, next_token: str | None = None) -> ResultPage:
        request: dict[str, Any] = {"QueryExecutionId": execution_id}
        if next_token is not None:
            request["NextToken"] = next_token
        response = _call(self._client.get_query_results, **request)
        return parse_results_page(response)

    def stop_query(self, execution_id: str) -> None:
        logger.info("Stopping query execution %s", execution_id)
        _call(self._client.stop_query_execution, QueryExecutionId=execution_id)

    def work_group_output_location(self, work_group: str) -> str | None:
        """Return the result output location configured on *work_group*, if any."""
        response = _call(self._client.get_work_group, WorkGroup=work_group)
        configuration = response.get("WorkGroup", {}).get("Configuration", {})
        location = configuration.get("ResultConfiguration", {}).get("OutputLocation")
        return str(location) if location else None


# ---------------------------------------------------------------------------
# Execution context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CallerIdentity:
    account: str
    arn: str


@dataclass(frozen=True)
class ExecutionContext:
    """Credentials, identity and scope established once at startup."""

    session: boto3.Session
    identity: CallerIdentity
    scope: QueryScope


def create_execution_context(
    scope: QueryScope,
    region: str | None = None,
    profile: str | None = None,
) -> ExecutionContext:
    """Resolve AWS credentials and the caller identity for *scope*.

    Raises
    ------
    ConfigurationError
        If the credential chain cannot produce a session or STS rejects it.
    """
    try:
        session = boto3.Session(profile_name=profile, region_name=region)
        response = session.client("sts").get_caller_identity()
    except (ClientError, BotoCoreError) as exc:
        raise ConfigurationError(f"could not get AWS caller identity: {describe_service_error(exc)}") from exc

    identity = CallerIdentity(account=str(response.get("Account", "")), arn=str(response.get("Arn", "")))
    logger.info("Resolved caller identity %s", identity.arn)
    return ExecutionContext(session=session, identity=identity, scope=scope)


def check_work_group(client: AthenaClient, scope: QueryScope) -> bool:
    """Return ``True`` if results have somewhere to go for *scope*.

    Either an explicit output location was configured or the work group
    defines one.
    """
    if scope.output_location:
        return True
    return client.work_group_output_location(scope.work_group) is not None
