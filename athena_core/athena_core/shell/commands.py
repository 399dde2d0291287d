"""Meta-command catalogue and session-setting commands.

Setting commands (``.ddl``, ``.stats``, ``.header``, ``.mode``, ``.output``)
are pure: they take the current :class:`SessionSettings` and return an updated
copy.  Action commands (``.quit``, ``.schema``, ``.save`` ...) need the shell's
collaborators and are only validated here.
"""

from __future__ import annotations

from pathlib import Path

from athena_core.errors import CommandSyntaxError, UnknownCommandError
from athena_core.models.session import OutputMode, SessionSettings
from athena_core.shell.assembler import MetaCommand

# Ordered for .help output.
COMMAND_HELP: dict[str, str] = {
    ".ddl": "Enable or disable DDL statements 'CREATE', 'ALTER' and 'DROP'",
    ".exit": "Synonym for quit",
    ".file": "Run the commands in the file specified",
    ".header": "Turn on or off display of result set headers (column names)",
    ".help": "Display this message",
    ".mode": "Change output mode: ascii, csv, json [array|objectperline]",
    ".output": "Output to stdout or a file, if blank it uses stdout",
    ".save": "Save the default work-group and database for next time",
    ".schema": "Print the schema of the database",
    ".stats": "Display query stats",
    ".quit": "Exit this utility",
}

SETTING_COMMANDS: frozenset[str] = frozenset({".ddl", ".stats", ".header", ".mode", ".output"})
ACTION_COMMANDS: frozenset[str] = frozenset({".quit", ".exit", ".help", ".schema", ".save", ".file"})

_NO_ARG_COMMANDS: frozenset[str] = frozenset({".quit", ".exit", ".help", ".schema", ".save"})

_JSON_STYLES: dict[str, OutputMode] = {
    "array": OutputMode.JSON_ARRAY,
    "objectperline": OutputMode.JSON_LINES,
}


def _parse_switch(command: MetaCommand) -> bool:
    if len(command.args) != 1:
        raise CommandSyntaxError(f"{command.name} expects an argument")
    value = command.args[0]
    if value == "on":
        return True
    if value == "off":
        return False
    raise CommandSyntaxError(f"{command.name} expects either 'on' or 'off', '{value}' is unknown")


def _parse_mode(command: MetaCommand) -> OutputMode:
    if not command.args:
        raise CommandSyntaxError(".mode expects an argument")

    mode, *rest = command.args
    if mode in ("ascii", "csv"):
        if rest:
            raise CommandSyntaxError(f".mode {mode} takes no further arguments")
        return OutputMode.ASCII if mode == "ascii" else OutputMode.CSV
    if mode == "json":
        if not rest:
            return OutputMode.JSON_ARRAY
        if len(rest) == 1 and rest[0] in _JSON_STYLES:
            return _JSON_STYLES[rest[0]]
        raise CommandSyntaxError(f".mode json expects either 'array' or 'objectperline', '{' '.join(rest)}' is unknown")
    raise CommandSyntaxError(f".mode expects either 'ascii', 'csv' or 'json', '{mode}' is unknown")


def validate_command(command: MetaCommand) -> None:
    """Check that *command* is known and has a valid argument count.

    Raises
    ------
    UnknownCommandError
        The command name is not recognised.
    CommandSyntaxError
        The arguments are malformed.
    """
    if command.name not in SETTING_COMMANDS and command.name not in ACTION_COMMANDS:
        raise UnknownCommandError(command.name)
    if command.name in _NO_ARG_COMMANDS and command.args:
        raise CommandSyntaxError(f"{command.name} takes no arguments")
    if command.name == ".file" and len(command.args) != 1:
        raise CommandSyntaxError(".file expects a file name")


def apply_setting(command: MetaCommand, settings: SessionSettings) -> SessionSettings:
    """Return *settings* updated by a setting command."""
    validate_command(command)

    if command.name == ".ddl":
        return settings.model_copy(update={"ddl_enabled": _parse_switch(command)})
    if command.name == ".stats":
        return settings.model_copy(update={"show_stats": _parse_switch(command)})
    if command.name == ".header":
        return settings.model_copy(update={"show_header": _parse_switch(command)})
    if command.name == ".mode":
        return settings.model_copy(update={"output_mode": _parse_mode(command)})
    if command.name == ".output":
        if len(command.args) > 1:
            raise CommandSyntaxError(".output expects at most one file name")
        output_file = Path(command.args[0]) if command.args else None
        return settings.model_copy(update={"output_file": output_file})

    raise CommandSyntaxError(f"{command.name} does not change session settings")


def help_lines() -> list[str]:
    return [f"{name}\t\t{text}" for name, text in COMMAND_HELP.items()]
