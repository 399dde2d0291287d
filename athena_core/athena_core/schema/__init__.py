"""Schema listing built on the query orchestrator."""

from __future__ import annotations

from athena_core.schema.schema_dump import dump_schema

__all__ = ["dump_schema"]
