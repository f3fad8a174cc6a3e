"""Configuration and logging setup for git-reviewer."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Use tomllib for Python 3.11+, tomli for 3.10
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


# Default config file location
CONFIG_FILE_PATH = Path.home() / ".config" / "git-reviewer" / "config.toml"

# Comma or space separated in the environment, not JSON
StrList = Annotated[list[str], NoDecode]

_LIST_FIELDS = (
    "ignored_extensions",
    "only_extensions",
    "ignored_paths",
    "only_paths",
    "mailmap_files",
)


def _load_config_file(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file if it exists.

    Args:
        config_path: Path to config file. Defaults to ~/.config/git-reviewer/config.toml

    Returns:
        Dictionary of configuration values, empty dict if file doesn't exist
    """
    if tomllib is None:
        # tomli not available on Python 3.10, skip config file loading
        return {}

    path = config_path or CONFIG_FILE_PATH
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        # Config file is optional
        logging.getLogger(__name__).warning(
            "Failed to load config file %s: %s", path, type(e).__name__
        )
        return {}


class Settings(BaseSettings):
    """git-reviewer settings.

    Settings are loaded in priority order:
    1. Environment variables (highest priority)
    2. .env file
    3. ~/.config/git-reviewer/config.toml (lowest priority)

    List settings accept either a list or a comma/space separated string.
    """

    model_config = SettingsConfigDict(
        env_prefix="GIT_REVIEWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Ranking
    base_branch: str = "master"
    top_n: int = Field(default=3, ge=0)
    default_window_months: int = Field(default=6, ge=0)

    # Path filters
    ignored_extensions: StrList = Field(default_factory=list)
    only_extensions: StrList = Field(default_factory=list)
    ignored_paths: StrList = Field(default_factory=list)
    only_paths: StrList = Field(default_factory=list)

    # Identity
    mailmap_files: StrList = Field(default_factory=list)

    # Git
    git_binary: str = "git"
    blame_timeout: float = Field(default=60.0, gt=0)
    max_concurrency: int = Field(default=8, ge=0)  # 0 = one task per path, unbounded

    # Logging
    log_level: str = "INFO"

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def split_list(cls, v: Any) -> Any:
        """Accept ``"a,b c"`` strings for list settings."""
        if isinstance(v, str):
            return [part for part in v.replace(",", " ").split() if part]
        return v

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Load values from config file for any fields not set via env vars."""
        config_data = _load_config_file()

        if not config_data:
            return values

        # Config file uses the same keys as the settings fields
        for key in cls.model_fields:
            if key not in values or values[key] is None:
                if key in config_data:
                    values[key] = config_data[key]

        return values


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the singleton Settings instance.

    Primarily used for testing to ensure fresh settings are loaded.
    """
    global _settings
    _settings = None


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging for git-reviewer."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress asyncio debug chatter about subprocess transports
    logging.getLogger("asyncio").setLevel(logging.WARNING)


__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "CONFIG_FILE_PATH",
]
