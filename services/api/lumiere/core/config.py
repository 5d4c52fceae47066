from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    database_url: str = Field(default="sqlite+pysqlite:///./wardrobe.db")

    gemini_api_key: str = ""
    text_model: str = "gemini-3-flash-preview"
    image_model: str = "gemini-2.5-flash-image"
    analysis_web_search: bool = True

    placeholder_image_base: str = "https://picsum.photos/seed"
    max_upload_bytes: int = 50 * 1024 * 1024

    base_dashboard_url: str = "http://localhost:5173"
    cors_extra_origins: str = ""

    @field_validator("placeholder_image_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


settings = Settings()
