"""
Configuration management using pydantic-settings.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hdkeys.path import DerivationPath


LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HDKEYS_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # BIP44 Ethereum account 0, first external address
    default_path: str = "m/44'/60'/0'/0/0"
    strict_xprv: bool = True

    log_level: str = "INFO"

    @field_validator("default_path")
    @classmethod
    def validate_default_path(cls, v: str) -> str:
        DerivationPath.parse(v)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


def get_settings() -> Settings:
    return Settings()
