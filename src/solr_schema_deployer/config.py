"""
Configuration management for the Solr schema deployer.

This module handles loading and validating configuration from environment variables
and .env files using Pydantic for robust configuration management.
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator


class SOLRConfig(BaseModel):
    """Configuration for the Solr core that receives the configset."""

    base_url: str = Field(
        default="http://localhost:8983/solr",
        description="Base URL for the Solr instance",
    )
    core: str = Field(description="Name of the Solr core to deploy to")
    schema_upload_url: Optional[str] = Field(
        default=None,
        description="Explicit schema upload URL. Derived from the core URL when unset",
    )
    username: Optional[str] = Field(
        default=None, description="Username for Solr authentication"
    )
    password: Optional[str] = Field(
        default=None, description="Password for Solr authentication"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(
        default=True, description="Whether to verify SSL certificates"
    )
    max_retries: int = Field(
        default=3, description="Transport-level retries for idempotent requests"
    )

    @validator("base_url")
    def validate_base_url(cls, v: str) -> str:
        """Validate that the base URL is properly formatted."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Solr base URL must start with http:// or https://")
        if v.endswith("/"):
            v = v.rstrip("/")
        return v

    @validator("schema_upload_url")
    def validate_schema_upload_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("Schema upload URL must start with http:// or https://")
        return v

    @validator("core")
    def validate_core(cls, v: str) -> str:
        v = v.strip().strip("/")
        if "/" in v:
            raise ValueError("Core name must not contain '/'")
        return v

    @validator("timeout")
    def validate_timeout(cls, v: int) -> int:
        """Validate that timeout is positive."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @validator("max_retries")
    def validate_max_retries(cls, v: int) -> int:
        if not (0 <= v <= 10):
            raise ValueError("Max retries must be between 0 and 10")
        return v


class DeployConfig(BaseModel):
    """Where configsets come from and which environment we are deploying from."""

    configsets_dir: Path = Field(
        default=Path("configsets"),
        description="Directory holding one configset sub-directory per server id",
    )
    default_server_id: str = Field(
        default="default", description="Server id used when none is given"
    )
    managed_platform: bool = Field(
        default=False, description="Running on the managed Solr platform"
    )
    local_development: bool = Field(
        default=False, description="Running against a local development Solr"
    )

    @validator("default_server_id")
    def validate_default_server_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Default server id must not be empty")
        return v.strip()


class MCPConfig(BaseModel):
    """Configuration for the MCP server."""

    log_level: str = Field(default="INFO", description="Logging level")

    @validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper


class Config(BaseModel):
    """Main configuration class that combines all configuration sections."""

    solr: SOLRConfig
    deploy: DeployConfig = Field(default_factory=DeployConfig)
    mcp: MCPConfig = Field(default_factory=MCPConfig)

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

        solr_config = SOLRConfig(
            base_url=os.getenv("SOLR_BASE_URL", "http://localhost:8983/solr"),
            core=os.getenv("SOLR_CORE", ""),
            schema_upload_url=os.getenv("SOLR_SCHEMA_UPLOAD_URL") or None,
            username=os.getenv("SOLR_USERNAME") or None,
            password=os.getenv("SOLR_PASSWORD") or None,
            timeout=int(os.getenv("SOLR_TIMEOUT", "30")),
            verify_ssl=os.getenv("SOLR_VERIFY_SSL", "true").lower() == "true",
            max_retries=int(os.getenv("SOLR_MAX_RETRIES", "3")),
        )

        if not solr_config.core:
            raise ValueError("SOLR_CORE environment variable is required")

        # The managed platform only sets PANTHEON_ENVIRONMENT; its value varies
        # per environment (dev, test, live, multidev names).
        deploy_config = DeployConfig(
            configsets_dir=Path(os.getenv("SOLR_CONFIGSETS_DIR", "configsets")),
            default_server_id=os.getenv("SOLR_DEFAULT_SERVER_ID", "default"),
            managed_platform="PANTHEON_ENVIRONMENT" in os.environ,
            local_development=os.getenv("ENV", "").lower() == "local",
        )

        mcp_config = MCPConfig(log_level=os.getenv("LOG_LEVEL", "INFO"))

        return cls(solr=solr_config, deploy=deploy_config, mcp=mcp_config)


def get_config(env_file: Optional[Union[str, Path]] = None) -> Config:
    """
    Convenience function to get configuration.

    Args:
        env_file: Optional path to .env file.

    Returns:
        Configured Config instance.
    """
    return Config.from_env(env_file)
