from pathlib import Path
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from fancylistener import __version__

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "FancyListener"
    app_version: str = __version__
    app_env: str = "development"
    cors_origins: list[str] = []

    # Server
    host: str = "127.0.0.1"
    port: int = Field(3000, ge=1, le=65535)

    # Listener storage
    output_path: str = "."
    listeners_filename: str = "listeners.json"
    max_body_size_mb: int = Field(10, ge=1)

    # Dashboard assets, mounted at / when the directory exists
    dashboard_dir: str = "public"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_store: str = "INFO"            # JSON mirror file reads/writes

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def listeners_file(self) -> Path:
        """Location of the JSON mirror file."""
        return Path(self.output_path) / self.listeners_filename

    @property
    def max_body_size_bytes(self) -> int:
        return self.max_body_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
