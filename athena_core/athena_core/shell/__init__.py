"""Interactive statement assembly and meta-command handling."""

from __future__ import annotations

from athena_core.shell.assembler import (
    AssemblerState,
    MetaCommand,
    Statement,
    StatementAssembler,
    check_statement_allowed,
    is_ddl,
)
from athena_core.shell.commands import (
    ACTION_COMMANDS,
    COMMAND_HELP,
    SETTING_COMMANDS,
    apply_setting,
    help_lines,
    validate_command,
)

__all__ = [
    "ACTION_COMMANDS",
    "COMMAND_HELP",
    "SETTING_COMMANDS",
    "AssemblerState",
    "MetaCommand",
    "Statement",
    "StatementAssembler",
    "apply_setting",
    "check_statement_allowed",
    "help_lines",
    "is_ddl",
    "validate_command",
]
