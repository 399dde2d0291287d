"""Interactive session settings toggled by meta-commands.

The REPL owns a single :class:`SessionSettings` value and passes it to the
statement gate and the renderer on every run.  Meta-commands return an updated
copy rather than mutating shared state.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class OutputMode(str, Enum):
    """How a completed result is rendered."""

    ASCII = "ascii"
    CSV = "csv"
    JSON_ARRAY = "json-array"
    JSON_LINES = "json-objectperline"


class SessionSettings(BaseModel):
    """Per-session display and permission flags."""

    model_config = ConfigDict(frozen=True)

    ddl_enabled: bool = Field(
        default=False,
        description="When True, CREATE/ALTER/DROP statements may be submitted.",
    )
    show_stats: bool = Field(
        default=False,
        description="Print bytes scanned and engine runtime after each query.",
    )
    show_header: bool = Field(
        default=True,
        description="Include the column-name header in table and CSV output.",
    )
    output_mode: OutputMode = OutputMode.ASCII
    output_file: Path | None = Field(
        default=None,
        description="Append rendered output here instead of stdout.",
    )
