"""
Application settings and configuration.
All values can be overridden from environment variables or a .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Message Dispatcher"

    # Database - Use DATA_DIR for a persistent volume
    data_dir: str = "."
    database_url_override: Optional[str] = None

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the message store."""
        if self.database_url_override:
            return self.database_url_override
        return f"sqlite+aiosqlite:///{self.data_dir}/messages.db"

    # Cache Configuration
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = 5.0
    cache_ttl_seconds: int = 86400

    # Delivery Endpoint Configuration
    delivery_url: str = "https://webhook.site"
    delivery_path: str = "/messages"
    delivery_auth_key: str = ""
    delivery_timeout_seconds: float = 10.0

    # Processor Configuration
    processor_interval_seconds: float = 120
    processor_batch_size: int = 2
    processor_auto_start: bool = False

    # Application Settings
    debug: bool = False
    timezone: str = "UTC"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
