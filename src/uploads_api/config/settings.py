# src/uploads_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from uploads_api.config.settings import get_settings
        settings = get_settings()
        uri = settings.mongodb_uri
    """

    # Application Settings
    app_name: str = Field(
        default="task-files-api",
        description="Application name"
    )

    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )

    port: int = Field(
        default=5000,
        description="Port the HTTP server listens on"
    )

    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Document Store Configuration
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("URI_MONGODB", "MONGODB_URI", "mongodb_uri"),
        description="MongoDB connection string"
    )

    database_name: str = Field(
        default="crack-ai-db",
        description="MongoDB database holding the files collection"
    )

    collection_name: str = Field(
        default="files",
        description="Collection storing FileRecord documents"
    )

    enforce_unique_filenames: bool = Field(
        default=False,
        description="Create a unique (taskId, filename) index to close the concurrent upload race"
    )

    # Payload Storage
    payload_storage: str = Field(
        default="inline",
        description="Where payload bytes live: inline (in the document) or s3"
    )

    s3_bucket_name: str = Field(
        default="task-files",
        description="S3 bucket for offloaded payloads"
    )

    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("AWS_DEFAULT_REGION", "aws_region"),
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_ENDPOINT_URL", "aws_endpoint_url"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('payload_storage', mode='before')
    @classmethod
    def validate_payload_storage(cls, v):
        """Validate payload storage is one of the allowed values."""
        v = str(v).strip().lower()
        valid_modes = ["inline", "s3"]
        if v not in valid_modes:
            raise ValueError(f"Invalid payload_storage: {v}. Must be one of {valid_modes}")
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        v = str(v).strip().upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v

    @property
    def masked_mongodb_uri(self) -> str:
        """Connection string with any password replaced, safe to print or log."""
        scheme, sep, rest = self.mongodb_uri.partition("://")
        if not sep or "@" not in rest:
            return self.mongodb_uri
        credentials, _, location = rest.rpartition("@")
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:****@{location}"

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
