from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    max_logs: int = Field(default=200, ge=1, alias="MAX_LOGS")
    default_log_limit: int = Field(default=50, ge=1, alias="DEFAULT_LOG_LIMIT")
    log_body_preview_chars: int = Field(default=500, ge=1, alias="LOG_BODY_PREVIEW_CHARS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")
    public_dir: str = Field(default="public", alias="PUBLIC_DIR")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    @property
    def public_path(self) -> Path:
        return Path(self.public_dir)

    @property
    def images_path(self) -> Path:
        return self.public_path / "images"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
