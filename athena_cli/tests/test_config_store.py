"""Tests for athena_cli/athena_cli/config_store.py -- saved default scope."""

from __future__ import annotations

import stat
from pathlib import Path

from athena_cli.config_store import config_path, load_saved_config, load_saved_scope, save_scope

# ---------------------------------------------------------------------------
# load_saved_config
# ---------------------------------------------------------------------------


class TestLoadSavedConfig:
    def test_missing_file(self, config_file: Path) -> None:
        assert load_saved_config() == {}
        assert load_saved_scope() == (None, None)

    def test_valid_toml(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[defaults]\nwork_group = "primary"\ndatabase = "sales"\n', encoding="utf-8")

        assert load_saved_config() == {"defaults": {"work_group": "primary", "database": "sales"}}
        assert load_saved_scope() == ("primary", "sales")

    def test_malformed_toml_ignored(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("this is not valid toml [[[", encoding="utf-8")

        assert load_saved_config() == {}

    def test_binary_content_ignored(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_bytes(b"\x00\x01\x02\xff\xfe")

        assert load_saved_config() == {}

    def test_partial_scope(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[defaults]\ndatabase = "sales"\n', encoding="utf-8")

        assert load_saved_scope() == (None, "sales")


# ---------------------------------------------------------------------------
# save_scope
# ---------------------------------------------------------------------------


class TestSaveScope:
    def test_round_trip(self, config_file: Path) -> None:
        assert save_scope("primary", "sales") == config_file
        assert load_saved_scope() == ("primary", "sales")

    def test_owner_only_permissions(self, config_file: Path) -> None:
        save_scope("primary", "sales")

        mode = stat.S_IMODE(config_file.stat().st_mode)
        assert mode == stat.S_IRUSR | stat.S_IWUSR

    def test_quotes_are_escaped(self, config_file: Path) -> None:
        save_scope('team "a"', "sales")

        assert load_saved_scope() == ('team "a"', "sales")

    def test_overwrites_previous_scope(self, config_file: Path) -> None:
        save_scope("primary", "sales")
        save_scope("adhoc", "logs")

        assert load_saved_scope() == ("adhoc", "logs")

    def test_config_path(self, config_file: Path) -> None:
        assert config_path() == config_file
