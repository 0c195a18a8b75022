from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_log_dir() -> Path:
    return Path.home() / ".stackctl" / "logs"


class Settings(BaseSettings):
    """Configuration for the stackctl menu and CLI.

    Values are loaded from environment variables and `.env`.

    Notes:
    - Colors accept a 256-color index ("86"), a hex value ("#5fffd7") or a
      named color understood by prompt_toolkit ("ansicyan").
    - Logs go to a file only while the full-screen menu is running.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Menu styling
    STACK_CTL_TITLE_COLOR: str = Field(default="86")
    STACK_CTL_ITEM_COLOR: str = Field(default="86")
    STACK_CTL_SELECTED_ITEM_COLOR: str = Field(default="82")

    # Title of the root screen; never part of a breadcrumb.
    STACK_CTL_ROOT_TITLE: str = Field(default="Stack Control CLI")

    # Logging (diagnostic; rotated daily)
    STACK_CTL_LOG_DIR: Path = Field(default_factory=_default_log_dir)
    STACK_CTL_LOG_LEVEL: str = Field(default="INFO")
    # Timed rotation retention count (days). Old log files are auto-deleted.
    STACK_CTL_LOG_BACKUP_COUNT: int = Field(default=7)


def load_settings() -> Settings:
    s = Settings()
    s.STACK_CTL_LOG_DIR = s.STACK_CTL_LOG_DIR.expanduser()
    return s
