"""
Application configuration management.

Uses pydantic-settings for type-safe environment variable parsing.
All configuration is centralized here so routers and storage backends
never call os.getenv() themselves.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """
    Application settings with validation and type coercion.

    Values are resolved once from an ordered list of sources
    (see settings_customise_sources) and are immutable afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Storage Backend Selection
    # Options: "postgres", "memory"
    storage_backend: Literal["postgres", "memory"] = "postgres"

    # Relational storage
    db_conn: str = ""
    db_connect_attempts: int = 5
    db_connect_retry_delay_seconds: float = 3.0
    db_connect_timeout_seconds: int = 15

    # At most pool_size + max_overflow open connections,
    # pool_size of them kept idle.
    db_pool_size: int = 1
    db_max_overflow: int = 1
    db_pool_recycle_seconds: int = 3600

    # Server
    server_host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Source precedence, highest first.

        Explicit kwargs, then the process environment, then the .env file.
        Field defaults apply when no source provides a value.
        """
        return (init_settings, env_settings, dotenv_settings)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_postgres(self) -> bool:
        """Check if using the relational backend."""
        return self.storage_backend == "postgres"

    @property
    def is_memory(self) -> bool:
        """Check if using the in-memory backend."""
        return self.storage_backend == "memory"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings singleton.

    Use this function to get settings instance throughout the application.
    The @lru_cache ensures we only parse environment once.
    """
    return Settings()


# Convenience export for direct import
settings = get_settings()
