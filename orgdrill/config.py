"""
Configuration settings for orgdrill.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be set as ORGDRILL_<FIELD>, e.g. ORGDRILL_ROOT_DIR=~/notes.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".orgdrill"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORGDRILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Content
    # ========================================
    root_dir: Path = Field(
        default=Path.home() / "org",
        description="Directory searched for outline files",
    )
    exercise_type_id: str = Field(
        default="exercise",
        description="Value of the TYPE property that marks an exercise heading",
    )
    definition_type_id: str = Field(
        default="definition",
        description="Value of the TYPE property that marks a definition heading",
    )
    locator_command: str = Field(
        default="rg",
        description="Text-search executable used to find candidate files (ripgrep)",
    )
    file_glob: str = Field(
        default="*.org",
        description="Glob restricting which files the locator searches",
    )
    continue_on_malformed: bool = Field(
        default=False,
        description="Report and skip files with malformed items instead of aborting the run",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default=f"sqlite:///{DEFAULT_DATA_DIR / 'ratings.db'}",
        description="SQLAlchemy URL of the rating store",
    )

    # ========================================
    # Review session
    # ========================================
    key_reveal: str = Field(default="r", description="Key that reveals the answer")
    key_skip: str = Field(default="s", description="Key that skips the item")
    key_quit: str = Field(default="q", description="Key that ends the session")
    key_success: str = Field(default="y", description="Key that rates a successful recall")
    key_failure: str = Field(default="n", description="Key that rates a failed recall")
    empty_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pause after reporting that nothing is due",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("root_dir")
    @classmethod
    def _expand_root(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _check_type_ids(self) -> Settings:
        if not self.exercise_type_id.strip() or not self.definition_type_id.strip():
            raise ValueError("Exercise and definition type identifiers must not be empty")
        if self.exercise_type_id == self.definition_type_id:
            raise ValueError(f"Exercise and definition type identifiers must differ: {self.exercise_type_id!r}")
        return self

    @model_validator(mode="after")
    def _check_keys(self) -> Settings:
        keys = self.key_bindings()
        if len(set(keys.values())) != len(keys):
            raise ValueError(f"Key bindings must be distinct: {keys}")
        if any(len(key) != 1 for key in keys.values()):
            raise ValueError(f"Key bindings must be single characters: {keys}")
        return self

    def key_bindings(self) -> dict[str, str]:
        """Choice name -> key."""
        return {
            "reveal": self.key_reveal,
            "skip": self.key_skip,
            "quit": self.key_quit,
            "success": self.key_success,
            "failure": self.key_failure,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
