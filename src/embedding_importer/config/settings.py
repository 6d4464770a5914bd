"""Configuration management for the embedding importer.

This module provides:
- Settings class for environment variable configuration using pydantic-settings
- Construction of the SQLAlchemy database URL from its parts
- Singleton pattern for settings access
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

EMBEDDING_SIZE = 1536


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from the process environment and the ``.env.local``
    file. Either ``database_url`` or the individual ``db_*`` parts must be
    provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    db_host: str | None = Field(
        default=None,
        description="Database host"
    )
    db_port: int = Field(
        default=5432,
        description="Database port"
    )
    db_user: str | None = Field(
        default=None,
        description="Database user"
    )
    db_password: str | None = Field(
        default=None,
        description="Database password"
    )
    db_name: str | None = Field(
        default=None,
        description="Database name"
    )
    application_name: str = Field(
        default="yggdrasil",
        description="Application name reported to the database server"
    )
    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL, overrides the db_* parts"
    )

    # Import
    input_file: str = Field(
        default="embedding.csv",
        description="CSV file with precomputed embeddings"
    )
    embedding_size: int = Field(
        default=EMBEDDING_SIZE,
        description="Number of values in every embedding vector"
    )
    verify_max_lines: int = Field(
        default=10,
        description="Number of data rows inspected by the verify command"
    )
    fail_open_existence_check: bool = Field(
        default=True,
        description="Treat a failed embedding lookup as absence instead of aborting"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level"
    )
    log_file: str | None = Field(
        default=None,
        description="Optional path of a rotating log file"
    )

    @field_validator("db_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate database port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("embedding_size", "verify_max_lines")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be positive")
        return v

    @model_validator(mode="after")
    def validate_database(self) -> "Settings":
        """Require a complete set of connection parameters."""
        if self.database_url:
            return self

        missing = [
            name.upper()
            for name in ("db_host", "db_user", "db_password", "db_name")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"Missing database settings: {', '.join(missing)} "
                f"(or provide DATABASE_URL)"
            )
        return self

    @property
    def sqlalchemy_url(self) -> str | URL:
        """Database URL passed to ``create_engine``."""
        if self.database_url:
            return self.database_url

        return URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"application_name": self.application_name},
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings singleton instance.

    Returns:
        Settings instance loaded from environment variables
    """
    return Settings()
