"""Application configuration settings."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage selection
    storage_backend: Literal["sql", "redis"] = Field(default="sql")

    # SQL database configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./development.sqlite3")
    database_echo: bool = Field(default=False)

    # Redis configuration
    redis_host: str = Field(default="localhost")
    redis_port: int = Field(default=6379)
    redis_db: int = Field(default=0)
    redis_password: Optional[str] = Field(default=None)
    redis_connection_timeout: int = Field(default=5)
    redis_socket_timeout: int = Field(default=5)
    redis_max_connections: int = Field(default=10)

    # API configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=3000)
    api_debug: bool = Field(default=False)

    # Web configuration
    session_secret: str = Field(default="change-me-in-production")
    upload_dir: Path = Field(default=Path("files"))
    templates_dir: Path = Field(default=PACKAGE_ROOT / "templates")

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text


# Global settings instance
settings = Settings()
