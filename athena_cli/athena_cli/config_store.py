"""Persisted default scope for the shell.

Stores the default work group and database in ``~/.athenaquery/config.toml``
so they can be omitted from later invocations.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_CONFIG_FILE = Path.home() / ".athenaquery" / "config.toml"


def config_path() -> Path:
    return _CONFIG_FILE


def load_saved_config() -> dict[str, Any]:
    """Load ``~/.athenaquery/config.toml``.

    Returns an empty dict if the file does not exist or cannot be parsed.
    """
    if not _CONFIG_FILE.exists():
        return {}
    try:
        with open(_CONFIG_FILE, "rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError, UnicodeDecodeError):
        logger.warning("Ignoring unreadable config file %s", _CONFIG_FILE)
        return {}


def load_saved_scope() -> tuple[str | None, str | None]:
    """Return the saved ``(work_group, database)``, ``None`` where unset."""
    defaults = load_saved_config().get("defaults", {})
    work_group = defaults.get("work_group") or None
    database = defaults.get("database") or None
    return work_group, database


def save_scope(work_group: str, database: str) -> Path:
    """Write the default scope with owner-only permissions and return the path."""
    _CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    # JSON string literals are valid TOML basic strings.
    content = f"[defaults]\nwork_group = {json.dumps(work_group)}\ndatabase = {json.dumps(database)}\n"
    _CONFIG_FILE.write_text(content, encoding="utf-8")
    os.chmod(_CONFIG_FILE, stat.S_IRUSR | stat.S_IWUSR)

    logger.info("Saved default scope to %s", _CONFIG_FILE)
    return _CONFIG_FILE
