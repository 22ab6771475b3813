"""Connector configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from duckdb_s3_source.models.connector import ConnectorOption, Credentials

DEFAULT_BATCH_SIZE = 100_000


class Settings(BaseSettings):
    """Connector configuration loaded from environment variables.

    Values come from `.env` and then OS environment variables (highest
    priority). Storage credentials default to empty strings, which limits
    the connector to public datasets.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = Field(
        default="duckdb-s3-source",
        description="Service name attached to every log entry",
    )
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Storage credentials
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: SecretStr = SecretStr("")
    AWS_REGION: str = ""

    # DuckDB session
    DUCKDB_MEMORY_LIMIT: str = "1GB"
    DUCKDB_THREADS: int = Field(default=4, ge=1, le=64)
    DUCKDB_USER_AGENT: str = "duckdb-s3-source"
    SECRET_NAME: str = Field(
        default="storage_secret",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Name of the DuckDB secret holding storage credentials",
    )

    # Streaming
    BATCH_SIZE: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    STREAM_ERROR_POLICY: Literal["abort", "continue"] = Field(
        default="abort",
        description="Whether a failed dataset stream stops the whole run",
    )

    @property
    def credentials(self) -> Credentials:
        """Build storage credentials from the AWS_* settings."""
        return Credentials(
            access_key_id=self.AWS_ACCESS_KEY_ID,
            secret_access_key=self.AWS_SECRET_ACCESS_KEY,
            region=self.AWS_REGION,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Options surfaced to the host's configuration screen.
CONNECTOR_OPTIONS: dict[str, ConnectorOption] = {
    "accessKeyId": ConnectorOption(
        title="Access Key ID",
        description="Access Key ID for the AWS S3 bucket.",
        secret=False,
        shown=True,
    ),
    "secretAccessKey": ConnectorOption(
        title="Secret Access Key",
        description="Secret Access Key for the AWS S3 bucket.",
        secret=True,
    ),
    "region": ConnectorOption(
        title="Region",
        description="Region for the AWS S3 bucket.",
        secret=False,
    ),
}
