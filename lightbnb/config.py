"""
Configuration management using Pydantic settings.
Handles database connection parameters and query defaults from the environment.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable and .env support."""

    # Application configuration
    environment: str = "development"
    debug: bool = False

    # Database configuration; database_url wins over the individual parts
    database_url: Optional[str] = None
    postgres_db: str = "lightbnb"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # Connection pool settings
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 3600
    db_pool_timeout: int = 30

    # Query defaults
    default_query_limit: int = 10

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure the async driver is used for PostgreSQL URLs."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("default_query_limit")
    @classmethod
    def validate_default_query_limit(cls, v):
        if v < 0:
            raise ValueError("default_query_limit cannot be negative")
        return v

    @property
    def sqlalchemy_database_url(self) -> str:
        """Database URL handed to the async engine."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the process.
    """
    return Settings()


# Global settings instance
settings = get_settings()
