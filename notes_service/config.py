"""Service configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from the environment or a .env file.

    Every field can be overridden with a ``NOTES_``-prefixed variable,
    e.g. ``NOTES_PORT=8080``.
    """

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTES_",
    }

    service_name: str = "notes-service"

    # HTTP server
    host: str = "localhost"
    port: int = 5000
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Note ids
    id_length: int = 16


settings = Settings()
