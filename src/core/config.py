"""Configuration management for the queue backend."""

from typing import Optional, Literal
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field


DEFAULT_STORAGE_FILENAME = "queue_state.json"


class QueueStorageConfig(BaseSettings):
    """Snapshot file configuration."""

    file_path: Optional[Path] = Field(
        default=None,
        description="Path to the queue snapshot file (defaults to queue_state.json in the working directory)",
    )
    persist_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Maximum seconds a request waits for its own snapshot write",
    )

    model_config = {
        "env_prefix": "QUEUE_STORAGE_",
        "extra": "ignore",
    }

    def resolve_file_path(self) -> Path:
        """Return the configured snapshot path, falling back to the working directory."""
        if self.file_path is None:
            return Path.cwd() / DEFAULT_STORAGE_FILENAME
        return self.file_path


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server",
    )
    enable_cors: bool = Field(
        default=True,
        description="Enable permissive CORS for the API server",
    )

    model_config = {
        "env_prefix": "SERVER_",
        "extra": "ignore",
    }


class Settings(BaseSettings):
    """Main settings combining all configurations."""

    # Sub-configurations
    storage: QueueStorageConfig = Field(default_factory=QueueStorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    # General settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: Optional[Path] = Field(
        default=None,
        description="Directory for the rotating log file (console only when unset)",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment and files."""
        # Load dotenv explicitly so the nested configs see .env values too
        from dotenv import load_dotenv
        load_dotenv()
        return cls()


# Global settings instance
settings = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global settings
    if settings is None:
        settings = Settings.load()
    return settings


def reload_settings():
    """Reload settings from environment."""
    global settings
    settings = Settings.load()
    return settings
