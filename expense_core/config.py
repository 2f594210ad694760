import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExpenseBuddySettings(BaseSettings):
    """Runtime configuration, read from EXPENSEBUDDY_* variables or `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSEBUDDY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    data_directory: Path = Field(
        Path("data"),
        description="Directory holding one JSON file per record collection.",
    )
    log_level: str = Field("INFO", description="Root logger level name.")
    recent_limit: int = Field(8, ge=1, description="Rows shown under recent expenses.")
    currency_symbol: str = Field("$", description="Prefix used when formatting amounts.")

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value) -> Path:
        return Path(value).expanduser()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache()
def get_settings() -> ExpenseBuddySettings:
    return ExpenseBuddySettings()
