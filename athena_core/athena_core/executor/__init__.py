"""Remote query execution for the AthenaQuery core."""

from __future__ import annotations

from athena_core.executor.athena_client import (
    AthenaClient,
    CallerIdentity,
    ExecutionContext,
    check_work_group,
    create_execution_context,
    describe_service_error,
)
from athena_core.executor.base import QueryServiceClient
from athena_core.executor.orchestrator import PollConfig, QueryOrchestrator

__all__ = [
    "AthenaClient",
    "CallerIdentity",
    "ExecutionContext",
    "PollConfig",
    "QueryOrchestrator",
    "QueryServiceClient",
    "check_work_group",
    "create_execution_context",
    "describe_service_error",
]
