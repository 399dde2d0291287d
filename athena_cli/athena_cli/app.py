"""AthenaQuery CLI application -- Typer entry point for the interactive shell.

Resolves the target work group and database (command line, then environment,
then the saved config file), establishes AWS credentials and the caller
identity, and hands control to the REPL.  Prompts, status and errors go to
*stderr* via Rich; query results go to *stdout* or the session output file.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from athena_cli.config_store import load_saved_scope
from athena_cli.display import display_error
from athena_cli.logging_config import configure_logging
from athena_cli.repl import Shell
from athena_core.config import Settings, load_settings
from athena_core.errors import ConfigurationError, ServiceError
from athena_core.executor import (
    AthenaClient,
    PollConfig,
    QueryOrchestrator,
    check_work_group,
    create_execution_context,
)
from athena_core.models.execution import QueryScope

VERSION = "0.1.0"

EXIT_CONFIG_MISSING = 2
EXIT_CONTEXT_FAILED = 3

app = typer.Typer(
    name="athenaquery",
    help="AthenaQuery - interactive SQL shell for Amazon Athena",
    add_completion=False,
)
console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"AthenaQuery {VERSION}")
        raise typer.Exit(code=0)


def resolve_scope(settings: Settings) -> QueryScope:
    """Build the query scope, filling gaps from the saved config file.

    Raises
    ------
    ConfigurationError
        If the work group or database is still unknown.
    """
    saved_work_group, saved_database = load_saved_scope()
    work_group = settings.work_group or saved_work_group
    database = settings.database or saved_database

    if not work_group:
        raise ConfigurationError("'work-group' should be specified")
    if not database:
        raise ConfigurationError("'database' should be specified")

    return QueryScope(
        work_group=work_group,
        database=database,
        catalog=settings.catalog,
        output_location=settings.output_location,
    )


def build_orchestrator(client: AthenaClient, scope: QueryScope, settings: Settings) -> QueryOrchestrator:
    poll_config = PollConfig(
        interval_seconds=settings.poll_interval,
        timeout_seconds=settings.query_timeout_seconds,
        max_attempts=settings.max_poll_attempts,
    )
    return QueryOrchestrator(client, scope, poll_config)


def _warn_if_no_output_location(client: AthenaClient, scope: QueryScope) -> None:
    try:
        has_location = check_work_group(client, scope)
    except ServiceError as exc:
        console.print(f"[yellow]Warning: could not inspect work group {scope.work_group}: {escape(str(exc))}[/yellow]")
        return
    if not has_location:
        console.print(
            f"[yellow]Warning: work group {scope.work_group} has no result output location; "
            "pass --output-location or queries will fail.[/yellow]"
        )


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@app.command()
def main(
    work_group: str | None = typer.Option(
        None,
        "--work-group",
        "-w",
        help="Work group the queries should be executed in.",
    ),
    database: str | None = typer.Option(
        None,
        "--database",
        "-d",
        help="Database used for unqualified table names.",
    ),
    region: str | None = typer.Option(None, "--region", help="AWS region override."),
    profile: str | None = typer.Option(None, "--profile", help="AWS named profile."),
    output_location: str | None = typer.Option(
        None,
        "--output-location",
        help="S3 URI for query results, overriding the work group setting.",
    ),
    poll_interval: float | None = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between status polls (default 2).",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Give up on a query after this many seconds (default: wait indefinitely).",
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
    log_json: bool = typer.Option(
        False,
        "--log-json",
        help="Emit log records as single-line JSON.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Start an interactive SQL session against Amazon Athena."""
    try:
        settings = load_settings(
            work_group=work_group,
            database=database,
            region=region,
            profile=profile,
            output_location=output_location,
            poll_interval=poll_interval,
            query_timeout_seconds=timeout,
            log_level=log_level,
            structured_logging=log_json or None,
        )
    except ValidationError as exc:
        display_error(console, exc)
        raise typer.Exit(code=EXIT_CONFIG_MISSING) from exc

    configure_logging(settings.log_level, settings.structured_logging)

    try:
        scope = resolve_scope(settings)
    except ConfigurationError as exc:
        display_error(console, exc)
        raise typer.Exit(code=EXIT_CONFIG_MISSING) from exc

    console.print(f"AthenaQuery {VERSION}")
    console.print('Enter ".help" for usage hints')
    console.print(f"Using workgroup {scope.work_group} and database {scope.database}", highlight=False)

    try:
        context = create_execution_context(scope, region=settings.region, profile=settings.profile)
    except ConfigurationError as exc:
        display_error(console, exc)
        raise typer.Exit(code=EXIT_CONTEXT_FAILED) from exc

    console.print(
        f"Account ID: {context.identity.account}, Identity Arn: {context.identity.arn}",
        highlight=False,
    )

    try:
        client = AthenaClient(context.session)
    except ConfigurationError as exc:
        display_error(console, exc)
        raise typer.Exit(code=EXIT_CONTEXT_FAILED) from exc
    _warn_if_no_output_location(client, scope)

    shell = Shell(build_orchestrator(client, scope, settings), console)
    shell.run()
