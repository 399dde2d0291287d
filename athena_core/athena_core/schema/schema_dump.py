"""Reconstruct a database's DDL from information-schema queries.

Views are rebuilt textually from ``information_schema.views``; every other
table is described with ``SHOW CREATE TABLE`` and every row of its output
echoed line by line, whatever statement type the engine reports.  Queries
run one after another through the orchestrator; the first failure aborts the
dump.
"""

from __future__ import annotations

import logging
from typing import TextIO

from athena_core.executor.orchestrator import QueryOrchestrator

logger = logging.getLogger(__name__)


def _quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def views_query(database: str) -> str:
    return (
        "select table_name, view_definition from information_schema.views "
        f"where table_schema={_quote_literal(database)}"
    )


def tables_query(database: str) -> str:
    return f"select table_name from information_schema.tables where table_schema={_quote_literal(database)}"


def show_create_table_query(table: str) -> str:
    return f"show create table {table}"


def dump_schema(orchestrator: QueryOrchestrator, database: str, out: TextIO) -> list[str]:
    """Write ``CREATE`` statements for every view and table in *database*.

    Parameters
    ----------
    orchestrator:
        Executes the metadata queries.
    database:
        Database (schema) to dump.
    out:
        Text stream receiving the DDL.

    Returns
    -------
    list[str]
        Names of the tables that were described, in enumeration order.
    """
    views_result = orchestrator.execute(views_query(database))
    views: set[str] = set()
    for row in views_result.data_rows():
        name = row[0] or ""
        definition = ((row[1] if len(row) > 1 else None) or "").rstrip("\r\n")
        out.write(f"CREATE VIEW {name} AS\n")
        out.write(f"{definition};\n\n")
        views.add(name)

    tables_result = orchestrator.execute(tables_query(database))
    described: list[str] = []
    for table in tables_result.first_column():
        if table in views:
            continue
        create_result = orchestrator.execute(show_create_table_query(table))
        for row in create_result.rows:
            line = row[0] if row and row[0] is not None else ""
            out.write(f"{line}\n")
        out.write("\n")
        described.append(table)

    logger.info("Dumped %d view(s) and %d table(s) from %s", len(views), len(described), database)
    return described
