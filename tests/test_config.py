"""Tests for configuration loading.

**Feature: discipline-tracking**
"""

import tempfile
from pathlib import Path

import pytest

from disciplog.config import (
    DEFAULT_CONFIG,
    create_template_config,
    get_config_path,
    get_db_path,
    get_user_id,
    load_config,
)


@pytest.fixture
def config_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestConfig:
    """
    **Feature: discipline-tracking, Property 26: Configuration Defaults**

    Missing or unreadable configuration falls back to the defaults, and a
    partial file only overrides the keys it sets.
    """

    def test_missing_file_gives_defaults(self, config_dir: Path):
        assert load_config(config_dir / "missing.toml") == DEFAULT_CONFIG

    def test_partial_file_merged(self, config_dir: Path):
        path = config_dir / "config.toml"
        path.write_text('[dashboard]\nrecent_sessions = 10\n\n[user]\nid = "alex"\n')

        config = load_config(path)

        assert config["dashboard"]["recent_sessions"] == 10
        assert config["dashboard"]["score_trend_length"] == 14
        assert get_user_id(config) == "alex"

    def test_invalid_file_gives_defaults(self, config_dir: Path):
        path = config_dir / "config.toml"
        path.write_text("this is [not toml")

        assert load_config(path) == DEFAULT_CONFIG

    def test_defaults_not_mutated(self, config_dir: Path):
        config = load_config(config_dir / "missing.toml")
        config["user"]["id"] = "changed"

        assert DEFAULT_CONFIG["user"]["id"] == "local"

    def test_template_round_trip(self, config_dir: Path):
        path = create_template_config(config_dir / "nested" / "config.toml", user_name="Sam")

        config = load_config(path)

        assert config["user"]["name"] == "Sam"
        assert get_user_id(config) == "local"

    def test_home_override(self, config_dir: Path, monkeypatch):
        monkeypatch.setenv("DISCIPLOG_HOME", str(config_dir))

        assert get_config_path() == config_dir / "config.toml"
        assert get_db_path() == config_dir / "disciplog.db"

    def test_empty_user_id_falls_back(self):
        assert get_user_id({"user": {"id": ""}}) == "local"
        assert get_user_id({}) == "local"
