"""Line-oriented statement assembly for the interactive shell.

:class:`StatementAssembler` receives input one line at a time and decides
whether the line is a meta-command, part of a statement still being typed, or
the end of a statement.  It never executes anything itself: completed units
are returned to the caller, which runs them through the DDL gate and the
orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from athena_core.errors import PermissionDeniedError
from athena_core.models.session import SessionSettings

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "."
TERMINATOR = ";"
DDL_KEYWORDS: tuple[str, ...] = ("CREATE", "ALTER", "DROP")


class AssemblerState(str, Enum):
    FRESH = "FRESH"
    CONTINUATION = "CONTINUATION"


@dataclass(frozen=True)
class MetaCommand:
    """A dot-command and its space-separated arguments."""

    name: str
    args: tuple[str, ...] = ()

    @classmethod
    def parse(cls, line: str) -> MetaCommand:
        parts = line.split()
        return cls(name=parts[0], args=tuple(parts[1:]))


@dataclass(frozen=True)
class Statement:
    """A complete SQL statement with its terminator removed."""

    text: str


class StatementAssembler:
    """Accumulate input lines into meta-commands and statements.

    State transitions per line:

    * Fresh, line starts with ``.`` -> :class:`MetaCommand`, stays Fresh.
    * empty line -> buffer discarded, Fresh.
    * line not ending in ``;`` -> appended, Continuation.
    * line ending in ``;`` -> terminator stripped, appended, buffer trimmed and
      returned as a :class:`Statement`, Fresh.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._state = AssemblerState.FRESH

    @property
    def state(self) -> AssemblerState:
        return self._state

    @property
    def buffer(self) -> str:
        return self._buffer

    def reset(self) -> None:
        self._buffer = ""
        self._state = AssemblerState.FRESH

    def feed(self, line: str) -> MetaCommand | Statement | None:
        """Consume one input line.

        Returns the completed unit, or ``None`` when more input is needed or
        the line abandoned the current buffer.
        """
        text = line.rstrip("\r\n")

        if not text.strip():
            if self._buffer:
                logger.debug("Discarding unterminated statement buffer")
            self.reset()
            return None

        if self._state is AssemblerState.FRESH and text.startswith(COMMAND_PREFIX):
            return MetaCommand.parse(text)

        if not text.endswith(TERMINATOR):
            self._buffer = f"{self._buffer} {text}"
            self._state = AssemblerState.CONTINUATION
            return None

        sql = f"{self._buffer} {text[: -len(TERMINATOR)]}".strip(" \t")
        self.reset()
        if not sql:
            return None
        return Statement(text=sql)


def is_ddl(sql: str) -> bool:
    """Return ``True`` if *sql* lexically starts with a DDL keyword.

    This is a prefix test on the statement text, not a parse.
    """
    return sql.upper().startswith(DDL_KEYWORDS)


def check_statement_allowed(statement: Statement, settings: SessionSettings) -> None:
    """Apply the DDL gate.

    Raises
    ------
    PermissionDeniedError
        If *statement* is DDL and the session has DDL disabled.
    """
    if is_ddl(statement.text) and not settings.ddl_enabled:
        raise PermissionDeniedError("DDL not enabled, use '.ddl on' to allow CREATE, ALTER and DROP")
