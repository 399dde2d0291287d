"""Result rendering for the AthenaQuery shell.

A completed :class:`QueryResult` is rendered to text according to the session's
output mode (ASCII table, CSV, JSON array, or one JSON object per line) and
written to stdout or appended to the session's output file.  Status messages
and errors go to a separate *stderr* console so redirected results stay clean.
"""

from __future__ import annotations

import csv
import io
import json
import shutil
import sys
from typing import TYPE_CHECKING, Any, TextIO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from athena_core.models.session import OutputMode

if TYPE_CHECKING:
    from athena_core.models.execution import QueryResult, QueryStatistics
    from athena_core.models.session import SessionSettings

NULL_TEXT = "null"
INDEX_HEADER = "#"
_FILE_WIDTH = 4096


# ---------------------------------------------------------------------------
# Row shaping
# ---------------------------------------------------------------------------


def _header_names(result: QueryResult, width: int) -> list[str]:
    names = result.column_names[:width]
    return names + [""] * (width - len(names))


def _result_width(result: QueryResult, rows: list[list[str | None]]) -> int:
    widest_row = max((len(row) for row in rows), default=0)
    return max(len(result.columns), widest_row)


def _cell(value: str | None) -> str:
    return NULL_TEXT if value is None else value


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def render_table(result: QueryResult, show_header: bool = True, width: int | None = None) -> str:
    """Render *result* as an ASCII-bordered table."""
    rows = result.data_rows()
    column_count = _result_width(result, rows)

    table = Table(box=box.ASCII, show_header=show_header, pad_edge=True, expand=False)
    table.add_column(INDEX_HEADER, justify="right")
    for name in _header_names(result, column_count):
        table.add_column(Text(name))

    for idx, row in enumerate(rows):
        cells = [Text(_cell(v)) for v in row] + [Text("")] * (column_count - len(row))
        table.add_row(str(idx), *cells)

    buf = io.StringIO()
    console = Console(file=buf, width=width or _FILE_WIDTH, no_color=True, highlight=False)
    console.print(table)
    return buf.getvalue().rstrip("\n")


def render_csv(result: QueryResult, show_header: bool = True) -> str:
    """Render *result* as CSV with a leading row-index column."""
    rows = result.data_rows()
    column_count = _result_width(result, rows)

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    if show_header:
        writer.writerow([INDEX_HEADER, *_header_names(result, column_count)])
    for idx, row in enumerate(rows):
        writer.writerow([idx, *(_cell(v) for v in row)])
    return buf.getvalue().rstrip("\n")


def _json_keys(result: QueryResult, width: int) -> list[str]:
    names = result.column_names
    return [names[i] if i < len(names) and names[i] else f"col{i}" for i in range(width)]


def _json_objects(result: QueryResult) -> list[dict[str, Any]]:
    rows = result.data_rows()
    keys = _json_keys(result, _result_width(result, rows))
    return [dict(zip(keys, row, strict=False)) for row in rows]


def render_json(result: QueryResult, one_per_line: bool = False) -> str:
    """Render *result* as a JSON array, or as one JSON object per line."""
    objects = _json_objects(result)
    if one_per_line:
        return "\n".join(json.dumps(obj, ensure_ascii=False) for obj in objects)
    return json.dumps(objects, indent=2, ensure_ascii=False)


def render_result(result: QueryResult, settings: SessionSettings, width: int | None = None) -> str:
    """Render *result* in the session's output mode."""
    mode = settings.output_mode
    if mode is OutputMode.CSV:
        return render_csv(result, show_header=settings.show_header)
    if mode is OutputMode.JSON_ARRAY:
        return render_json(result)
    if mode is OutputMode.JSON_LINES:
        return render_json(result, one_per_line=True)
    return render_table(result, show_header=settings.show_header, width=width)


def format_stats(statistics: QueryStatistics | None) -> str:
    """Return the one-line statistics summary shown when ``.stats on``."""
    if statistics is None:
        return "Stats: not available"
    scanned = statistics.data_scanned_bytes if statistics.data_scanned_bytes is not None else "-"
    runtime = statistics.engine_execution_time_ms if statistics.engine_execution_time_ms is not None else "-"
    return f"Stats: bytes scanned: {scanned}, runtime: {runtime} ms"


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def write_output(text: str, settings: SessionSettings, stdout: TextIO | None = None) -> None:
    """Write *text* to the session destination.

    A configured output file is opened in append mode for every write, so
    successive results accumulate.
    """
    if settings.output_file is not None:
        with settings.output_file.open("a", encoding="utf-8") as fh:
            fh.write(text + "\n")
        return
    stream = stdout or sys.stdout
    stream.write(text + "\n")
    stream.flush()


def display_result(
    result: QueryResult,
    settings: SessionSettings,
    stdout: TextIO | None = None,
) -> None:
    """Render *result* and write it to the session destination."""
    width = None if settings.output_file is not None else shutil.get_terminal_size().columns
    write_output(render_result(result, settings, width=width), settings, stdout)


def display_stats(console: Console, statistics: QueryStatistics | None) -> None:
    console.print(format_stats(statistics), highlight=False, markup=False)


def display_error(console: Console, exc: BaseException) -> None:
    console.print(f"[red]Error: {escape(str(exc))}[/red]", highlight=False)
