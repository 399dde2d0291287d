"""Interactive read-eval-print loop.

Lines are fed to a :class:`StatementAssembler`.  Meta-commands either update
the session settings or trigger an action (help, schema dump, save, run a
file, quit); completed statements pass the DDL gate and are run by the
:class:`QueryOrchestrator`, one at a time, with the result rendered to the
session's output destination.  Any error aborts only the current unit.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

import typer
from rich.console import Console

from athena_cli.config_store import save_scope
from athena_cli.display import display_error, display_result, display_stats
from athena_core.errors import AthenaQueryError, CommandSyntaxError
from athena_core.executor.orchestrator import QueryOrchestrator
from athena_core.models.execution import ExecutionStatus
from athena_core.models.session import SessionSettings
from athena_core.schema import dump_schema
from athena_core.shell import (
    SETTING_COMMANDS,
    AssemblerState,
    MetaCommand,
    Statement,
    StatementAssembler,
    apply_setting,
    check_statement_allowed,
    help_lines,
    validate_command,
)

with contextlib.suppress(ImportError):
    import readline  # noqa: F401  -- line editing for input() where available

logger = logging.getLogger(__name__)

PROMPT = "athenaquery> "
PROMPT_CONT = "        ...> "


class Shell:
    """Drive the assembler, the DDL gate and the orchestrator from input lines.

    Parameters
    ----------
    orchestrator:
        Runs completed statements and schema queries.
    console:
        Console for prompts, status and errors (typically stderr).
    settings:
        Initial session settings.
    stdout:
        Stream for rendered results when no output file is set.
    read_line:
        Prompt-and-read callable; defaults to ``console.input``.
    """

    def __init__(
        self,
        orchestrator: QueryOrchestrator,
        console: Console,
        settings: SessionSettings | None = None,
        stdout: TextIO | None = None,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._console = console
        self._stdout = stdout or sys.stdout
        self._read_line = read_line or console.input
        self._assembler = StatementAssembler()
        self.settings = settings or SessionSettings()

    @property
    def assembler(self) -> StatementAssembler:
        return self._assembler

    # -- Loop ------------------------------------------------------------------

    def run(self) -> None:
        """Read lines until ``.quit``/``.exit`` or end of input.

        Raises
        ------
        typer.Exit
            Always, with code 0, when the session ends.
        """
        while True:
            prompt = PROMPT if self._assembler.state is AssemblerState.FRESH else PROMPT_CONT
            try:
                line = self._read_line(prompt)
            except EOFError:
                self._console.print()
                raise typer.Exit(code=0) from None
            except KeyboardInterrupt:
                self._console.print()
                self._assembler.reset()
                continue
            self.handle_line(line)

    def handle_line(self, line: str) -> None:
        """Process one input line, reporting any error and staying alive."""
        try:
            unit = self._assembler.feed(line)
            if isinstance(unit, MetaCommand):
                self.run_command(unit)
            elif isinstance(unit, Statement):
                self.run_statement(unit)
        except AthenaQueryError as exc:
            logger.debug("Statement aborted: %s", exc)
            display_error(self._console, exc)
        except OSError as exc:
            display_error(self._console, exc)

    # -- Statements --------------------------------------------------------------

    def run_statement(self, statement: Statement) -> None:
        check_statement_allowed(statement, self.settings)

        result = self._orchestrator.execute(
            statement.text,
            on_submitted=self._announce,
            on_succeeded=self._report_stats,
        )
        display_result(result, self.settings, self._stdout)

    def _announce(self, execution_id: str) -> None:
        self._console.print(f"Query id: {execution_id}", style="dim", highlight=False)

    def _report_stats(self, status: ExecutionStatus) -> None:
        if self.settings.show_stats:
            display_stats(self._console, status.statistics)

    # -- Commands ----------------------------------------------------------------

    def run_command(self, command: MetaCommand) -> None:
        if command.name in SETTING_COMMANDS:
            self.settings = apply_setting(command, self.settings)
            return

        validate_command(command)
        if command.name in (".quit", ".exit"):
            self._console.print("Goodbye.")
            raise typer.Exit(code=0)
        if command.name == ".help":
            for line in help_lines():
                self._console.print(line, highlight=False, markup=False)
        elif command.name == ".schema":
            self._dump_schema()
        elif command.name == ".save":
            scope = self._orchestrator.scope
            path = save_scope(scope.work_group, scope.database)
            self._console.print(f"Saved work group {scope.work_group} and database {scope.database} to {path}")
        elif command.name == ".file":
            self.run_file(Path(command.args[0]))

    def _dump_schema(self) -> None:
        database = self._orchestrator.scope.database
        if self.settings.output_file is None:
            dump_schema(self._orchestrator, database, self._stdout)
            return
        with self.settings.output_file.open("a", encoding="utf-8") as fh:
            dump_schema(self._orchestrator, database, fh)

    def run_file(self, path: Path) -> None:
        """Feed every line of *path* through the shell as if typed.

        The interactive buffer is set aside while the file runs and a partial
        statement left at the end of the file is discarded.
        """
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except UnicodeDecodeError as exc:
            raise CommandSyntaxError(f"{path} is not valid UTF-8 text: {exc.reason}") from exc
        logger.info("Running %d line(s) from %s", len(lines), path)

        outer = self._assembler
        self._assembler = StatementAssembler()
        try:
            for line in lines:
                self.handle_line(line)
        finally:
            self._assembler = outer
