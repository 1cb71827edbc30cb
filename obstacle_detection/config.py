"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    obstacle_env: str = "development"
    obstacle_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Classifier used when a request does not choose one
    default_fit_method: str = "search"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
