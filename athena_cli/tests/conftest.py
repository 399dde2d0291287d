"""Shared fixtures for CLI tests.

Every test gets a fake query service in place of Athena, a captured console,
and a config file under ``tmp_path`` so nothing touches ``~/.athenaquery``.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from athena_core.executor.orchestrator import PollConfig, QueryOrchestrator
from athena_core.models.execution import QueryScope
from athena_core.testing import FakeQueryService
from rich.console import Console

SCOPE = QueryScope(work_group="primary", database="sales")


@pytest.fixture(autouse=True)
def _no_poll_sleep() -> Iterator[None]:
    with patch("athena_core.executor.orchestrator.time.sleep"):
        yield


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """configure_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path: Path) -> Iterator[Path]:
    path = tmp_path / ".athenaquery" / "config.toml"
    with patch("athena_cli.config_store._CONFIG_FILE", path):
        yield path


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(console_output: io.StringIO) -> Console:
    return Console(file=console_output, no_color=True, highlight=False, width=120)


@pytest.fixture
def stdout() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def service() -> FakeQueryService:
    return FakeQueryService()


@pytest.fixture
def orchestrator(service: FakeQueryService) -> QueryOrchestrator:
    return QueryOrchestrator(service, SCOPE, PollConfig(interval_seconds=0.1))


def _scripted_input(
    lines: list[str | BaseException],
    prompts: list[str] | None = None,
) -> Callable[[str], str]:
    """Return a ``read_line`` that replays *lines* then signals end of input.

    Entries may be exception instances, which are raised instead of returned.
    """
    remaining = list(lines)

    def _read(prompt: str) -> str:
        if prompts is not None:
            prompts.append(prompt)
        if not remaining:
            raise EOFError
        item = remaining.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    return _read


@pytest.fixture
def scripted_input() -> Callable[..., Callable[[str], str]]:
    return _scripted_input
