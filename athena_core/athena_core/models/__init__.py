"""Domain models for the AthenaQuery core."""

from athena_core.models.execution import (
    DEFAULT_CATALOG,
    ColumnInfo,
    ExecutionState,
    ExecutionStatus,
    QueryResult,
    QueryScope,
    QueryStatistics,
    ResultPage,
    StatementType,
)
from athena_core.models.session import OutputMode, SessionSettings

__all__ = [
    "DEFAULT_CATALOG",
    "ColumnInfo",
    "ExecutionState",
    "ExecutionStatus",
    "OutputMode",
    "QueryResult",
    "QueryScope",
    "QueryStatistics",
    "ResultPage",
    "SessionSettings",
    "StatementType",
]
