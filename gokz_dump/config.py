"""
Configuration settings for gokz-dump.

Uses Pydantic Settings as the single place for run defaults. The tool reads no
environment variables and no config files: values come from the field
defaults or from keyword arguments passed in code (tests, embedding callers).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Tuple, Type

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_DB_PATH = "./gokz-sqlite.sq3"


class Settings(BaseSettings):
    # Input
    default_db_path: str = Field(DEFAULT_DB_PATH)

    # Output
    output_dir: str = Field(".")

    # Logging
    log_level: str = Field("INFO")
    json_logs: bool = Field(False)

    model_config = SettingsConfigDict(extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Constructor arguments only; environment, .env and secrets are ignored.
        return (init_settings,)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings.
    """
    return Settings()


__all__ = ["DEFAULT_DB_PATH", "Settings", "get_settings"]
