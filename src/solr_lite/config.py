"""
Configuration management for solr-lite.

This module handles loading and validating configuration from environment variables
and .env files using Pydantic.
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class SolrConfig(BaseModel):
    """Configuration for the SOLR core to talk to."""

    base_url: str = Field(
        default="http://localhost:8983/solr",
        description="Base URL for the SOLR instance",
    )
    collection: str = Field(description="Name of the SOLR collection (core) to use")
    def_type: Optional[str] = Field(
        default=None,
        description="Query parser (defType) to send, None to use the server default",
    )
    facet_limit: Optional[int] = Field(
        default=None, description="Default number of facet values to request"
    )
    batch_size: int = Field(
        default=20, description="Number of ids requested at a time by get_many"
    )

    @field_validator("base_url")
    def validate_base_url(cls, v: str) -> str:
        """Validate that the base URL is properly formatted."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("SOLR base URL must start with http:// or https://")
        if v.endswith("/"):
            v = v.rstrip("/")
        return v

    @field_validator("facet_limit")
    def validate_facet_limit(cls, v: Optional[int]) -> Optional[int]:
        """Validate that the facet limit is positive when given."""
        if v is not None and v <= 0:
            raise ValueError("Facet limit must be positive")
        return v

    @field_validator("batch_size")
    def validate_batch_size(cls, v: int) -> int:
        """Validate that the batch size is positive."""
        if v <= 0:
            raise ValueError("Batch size must be positive")
        return v

    @property
    def core_url(self) -> str:
        """URL of the collection, e.g. http://localhost:8983/solr/bibdata"""
        return f"{self.base_url}/{self.collection}"


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper


class Config(BaseModel):
    """Main configuration class that combines all configuration sections."""

    solr: SolrConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Config":
        """
        Load configuration from environment variables and optional .env file.

        Args:
            env_file: Optional path to .env file. If not provided, looks for .env
                     in the current directory.

        Returns:
            Configured Config instance.

        Raises:
            ValueError: If required configuration is missing or invalid.
        """
        if env_file is None:
            env_file = Path.cwd() / ".env"

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_dotenv(env_file)

        facet_limit = os.getenv("SOLR_FACET_LIMIT")
        solr_config = SolrConfig(
            base_url=os.getenv("SOLR_BASE_URL", "http://localhost:8983/solr"),
            collection=os.getenv("SOLR_COLLECTION", ""),
            def_type=os.getenv("SOLR_DEF_TYPE") or None,
            facet_limit=int(facet_limit) if facet_limit else None,
            batch_size=int(os.getenv("SOLR_BATCH_SIZE", "20")),
        )

        if not solr_config.collection:
            raise ValueError("SOLR_COLLECTION environment variable is required")

        logging_config = LoggingConfig(log_level=os.getenv("LOG_LEVEL", "INFO"))

        return cls(solr=solr_config, logging=logging_config)


def get_config(env_file: Optional[Union[str, Path]] = None) -> Config:
    """
    Convenience function to get configuration.

    Args:
        env_file: Optional path to .env file.

    Returns:
        Configured Config instance.
    """
    return Config.from_env(env_file)
