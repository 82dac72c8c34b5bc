from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    host: str = Field(default="0.0.0.0", alias="HOST")
    devices_port: int = Field(default=8080, alias="DEVICES_PORT")
    metrics_port: int = Field(default=8081, alias="METRICS_PORT")
    # Prometheus wants a single word here (no dashes or dots).
    metrics_namespace: str = Field(default="intro", alias="METRICS_NAMESPACE")
    device_type: str = Field(default="router", alias="DEVICE_TYPE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
