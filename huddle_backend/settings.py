from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from huddle_backend.errors import ConfigurationError


def yaml_config_settings_source(_: type[BaseSettings]):
    def _source() -> dict:
        path = Path(os.getenv("HUDDLE_CONFIG_FILE", "config.yaml"))
        if not path.exists():
            return {}
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")
        return data
    return _source


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HUDDLE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Media platform credentials; read without the prefix (APP_ID, APP_CERTIFICATE)
    app_id: str = Field(default="", validation_alias=AliasChoices("app_id", "APP_ID"))
    app_certificate: str = Field(default="", validation_alias=AliasChoices("app_certificate", "APP_CERTIFICATE"))

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, validation_alias=AliasChoices("port", "PORT"))
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_origin_regex: str | None = None

    # Tokens
    default_token_expiry_seconds: int = Field(default=3600, ge=0)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def require_credentials(self) -> None:
        if not self.app_id or not self.app_certificate:
            raise ConfigurationError("APP_ID and APP_CERTIFICATE environment variables are required.")

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings):
        # earlier sources win, so the YAML file only fills gaps left by init, env and .env
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            yaml_config_settings_source(cls),
        )


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
