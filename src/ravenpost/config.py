from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RAVENPOST_", env_file=".env", extra="ignore")

    dsn: str
    timeout: float = Field(default=5.0, gt=0)
    compression: bool = True
    logger_name: str = "root"
    release: str | None = None
    environment: str | None = None

    @classmethod
    def from_yaml(cls, config_path: str | Path = "config.yaml") -> "Settings":
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
        return cls(**config_data)
