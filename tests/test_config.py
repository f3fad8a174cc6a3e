"""Tests for configuration module."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from gitreviewer.config import (
    CONFIG_FILE_PATH,
    Settings,
    _load_config_file,
    configure_logging,
    get_settings,
    reset_settings,
)


class TestSettingsDefaults:
    """Tests for default settings values."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.base_branch == "master"
        assert settings.top_n == 3
        assert settings.default_window_months == 6
        assert settings.ignored_extensions == []
        assert settings.git_binary == "git"
        assert settings.blame_timeout == 60.0
        assert settings.max_concurrency == 8
        assert settings.log_level == "INFO"

    def test_default_config_path(self) -> None:
        expected = Path.home() / ".config" / "git-reviewer" / "config.toml"
        assert CONFIG_FILE_PATH == expected


class TestSettingsFromEnvironment:
    """Tests for loading settings from environment variables."""

    def test_scalar_values_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_REVIEWER_BASE_BRANCH", "main")
        monkeypatch.setenv("GIT_REVIEWER_TOP_N", "5")
        monkeypatch.setenv("GIT_REVIEWER_MAX_CONCURRENCY", "0")

        settings = Settings()

        assert settings.base_branch == "main"
        assert settings.top_n == 5
        assert settings.max_concurrency == 0

    def test_list_values_split_on_commas_and_spaces(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GIT_REVIEWER_IGNORED_EXTENSIONS", "png, lock svg")
        monkeypatch.setenv("GIT_REVIEWER_ONLY_PATHS", "src")

        settings = Settings()

        assert settings.ignored_extensions == ["png", "lock", "svg"]
        assert settings.only_paths == ["src"]

    def test_negative_top_n_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_REVIEWER_TOP_N", "-1")
        with pytest.raises(ValidationError):
            Settings()


class TestConfigFile:
    """Tests for TOML config file loading."""

    def test_load_from_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text('base_branch = "develop"\ntop_n = 2\n')

        config_data = _load_config_file(config_file)

        assert config_data == {"base_branch": "develop", "top_n": 2}

    def test_missing_config_file_returns_empty_dict(self, tmp_path: Path) -> None:
        assert _load_config_file(tmp_path / "nonexistent.toml") == {}

    def test_invalid_toml_returns_empty_dict(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("this is = = not toml")

        assert _load_config_file(config_file) == {}

    def test_settings_read_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            'base_branch = "trunk"\n'
            'ignored_extensions = ["png", "lock"]\n'
            'mailmap_files = "~/team.mailmap"\n'
        )

        with patch("gitreviewer.config.CONFIG_FILE_PATH", config_file):
            settings = Settings()

        assert settings.base_branch == "trunk"
        assert settings.ignored_extensions == ["png", "lock"]
        assert settings.mailmap_files == ["~/team.mailmap"]

    def test_env_vars_take_precedence_over_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text('base_branch = "trunk"\n')
        monkeypatch.setenv("GIT_REVIEWER_BASE_BRANCH", "main")

        with patch("gitreviewer.config.CONFIG_FILE_PATH", config_file):
            settings = Settings()

        assert settings.base_branch == "main"


class TestSettingsSingleton:
    """Tests for get_settings()/reset_settings()."""

    def test_get_settings_returns_same_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_reset_settings_clears_singleton(self) -> None:
        first = get_settings()
        reset_settings()
        assert get_settings() is not first


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_quiets_asyncio_logger(self) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger("asyncio").level == logging.WARNING
