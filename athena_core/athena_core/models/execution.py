"""Execution models for statements submitted to Athena.

An :class:`ExecutionStatus` is the snapshot returned by a single poll; it is
refreshed until it reaches a terminal state.  A :class:`QueryResult` is the
fully materialised output of one execution: every page's rows concatenated in
arrival order together with the column metadata from the first page.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_CATALOG = "AwsDataCatalog"


class ExecutionState(str, Enum):
    """Lifecycle state of a remote query execution."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


_TERMINAL_STATES: frozenset[ExecutionState] = frozenset(
    {
        ExecutionState.SUCCEEDED,
        ExecutionState.FAILED,
        ExecutionState.CANCELLED,
    }
)


class StatementType(str, Enum):
    """Statement classification reported by the engine.

    Only ``UTILITY`` changes how rows are interpreted: utility output has no
    header row and carries tab-delimited text in a single column.
    """

    DDL = "DDL"
    DML = "DML"
    UTILITY = "UTILITY"

    @classmethod
    def parse(cls, value: str | None) -> StatementType:
        """Map a raw engine value to a member, treating unknown values as DML."""
        if value is None:
            return cls.DML
        try:
            return cls(value.upper())
        except ValueError:
            return cls.DML


class QueryScope(BaseModel):
    """Where a statement runs: work group, database and catalog."""

    work_group: str = Field(..., min_length=1, description="Athena work group name.")
    database: str = Field(..., min_length=1, description="Default database for unqualified names.")
    catalog: str = Field(default=DEFAULT_CATALOG, description="Data catalog name.")
    output_location: str | None = Field(
        default=None,
        description="S3 URI for result files; falls back to the work group setting.",
    )


class QueryStatistics(BaseModel):
    """Engine statistics captured from the SUCCEEDED status response."""

    data_scanned_bytes: int | None = Field(default=None, ge=0)
    engine_execution_time_ms: int | None = Field(default=None, ge=0)
    total_execution_time_ms: int | None = Field(default=None, ge=0)
    queue_time_ms: int | None = Field(default=None, ge=0)


class ExecutionStatus(BaseModel):
    """A single poll response for an execution handle."""

    execution_id: str = Field(..., min_length=1)
    state: ExecutionState
    statement_type: StatementType = StatementType.DML
    state_change_reason: str | None = None
    statistics: QueryStatistics | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES


class ColumnInfo(BaseModel):
    """Column descriptor from the result set metadata."""

    name: str
    type: str = "varchar"
    nullable: str | None = None


class ResultPage(BaseModel):
    """One page of results.  ``next_token`` is ``None`` on the final page."""

    rows: list[list[str | None]] = Field(default_factory=list)
    columns: list[ColumnInfo] = Field(default_factory=list)
    next_token: str | None = None


class QueryResult(BaseModel):
    """Materialised output of one successful execution."""

    execution_id: str
    statement_type: StatementType = StatementType.DML
    columns: list[ColumnInfo] = Field(default_factory=list)
    rows: list[list[str | None]] = Field(default_factory=list)
    statistics: QueryStatistics | None = None

    @property
    def is_utility(self) -> bool:
        return self.statement_type is StatementType.UTILITY

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def data_rows(self) -> list[list[str | None]]:
        """Return the rows a consumer should see.

        For generic statement types the engine emits the column names as the
        first data row, so it is dropped.  Utility rows have no header; each
        row's single text field is split on tabs, with empty fields becoming
        ``None``.
        """
        if not self.is_utility:
            return [list(row) for row in self.rows[1:]]

        split_rows: list[list[str | None]] = []
        for row in self.rows:
            text = row[0] if row else None
            if text is None:
                split_rows.append([None])
                continue
            split_rows.append([field if field != "" else None for field in text.split("\t")])
        return split_rows

    def first_column(self) -> list[str]:
        """Return the first field of every data row, ``None`` as empty text."""
        if self.is_utility:
            return [(row[0] if row and row[0] is not None else "") for row in self.rows]
        return [(row[0] if row and row[0] is not None else "") for row in self.rows[1:]]
