"""
Configuration Loader

Handles loading and validating YAML/JSON configuration files.
Supports environment variable substitution for sensitive values.
"""

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from dotenv import load_dotenv


# Load environment variables from .env file if present
load_dotenv()

# Environment variable naming the config file used by the HTTP API
CONFIG_ENV_VAR = "TABLE_MODELER_CONFIG"


class PlatformConfig(BaseModel):
    """Platform connection configuration."""

    url: str = Field(..., description="Platform instance URL")
    database: str = Field(..., description="Database name")
    username: str = Field(..., description="Username for authentication")
    password: str = Field(..., description="Password or API key")
    timeout: int = Field(default=120, ge=10, le=600)
    retry_attempts: int = Field(default=3, ge=1, le=10, description="Retry attempts on failure")
    retry_delay: float = Field(default=2.0, ge=0.5, le=60.0, description="Delay between retries")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensure URL is valid and normalize."""
        v = v.rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v


class BuilderConfig(BaseModel):
    """Column classification settings."""

    discriminator_column: str | None = Field(
        default="sys_class_name",
        description="Class-indicator column of the table hierarchy (null disables)",
    )
    reference_types: list[str] = Field(
        default_factory=lambda: ["reference"],
        min_length=1,
        description="Internal types treated as references",
    )
    integer_types: list[str] = Field(
        default_factory=lambda: ["integer", "longint"],
        description="Internal types whose choice values are numeric",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    output_dir: str | None = Field(default=None, description="Audit output directory")
    export_json: bool = Field(default=True, description="Export audit as JSON")
    export_csv: bool = Field(default=False, description="Export audit as CSV")
    console_output: bool = Field(default=True, description="Print build progress")


class ModelerConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="table_modeler", description="Configuration name")
    version: str = Field(default="1.0", description="Configuration version")

    platform: PlatformConfig | None = Field(default=None, description="Live platform connection")
    catalog: str | None = Field(default=None, description="Path to an offline table catalog")
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def require_one_source(self) -> "ModelerConfig":
        """Exactly one metadata source must be configured."""
        if (self.platform is None) == (self.catalog is None):
            raise ValueError("Configure exactly one of 'platform' or 'catalog'")
        return self


class ConfigLoader:
    """
    Loads and validates configuration from YAML/JSON files.

    Supports environment variable substitution using ${VAR_NAME} syntax.
    A relative catalog path is resolved against the config file's directory.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load("config.yaml")
        >>> print(config.builder.discriminator_column)
    """

    # Pattern for environment variable substitution
    ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def __init__(self, env_file: Path | None = None):
        """
        Initialize config loader.

        Args:
            env_file: Optional path to .env file
        """
        if env_file:
            load_dotenv(env_file)

    def load(self, config_path: str | Path) -> ModelerConfig:
        """
        Load configuration from file.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(config_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = self._substitute_env_vars(path.read_text(encoding="utf-8"))

        # Parse YAML (also handles JSON as subset of YAML)
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse configuration: {e}") from e

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        try:
            config = ModelerConfig.model_validate(data)
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        if config.catalog and not Path(config.catalog).is_absolute():
            config.catalog = str(path.parent / config.catalog)

        return config

    def _substitute_env_vars(self, content: str) -> str:
        """Replace ${VAR_NAME} with environment variable values."""
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            value = os.environ.get(var_name)
            if value is None:
                raise ValueError(
                    f"Environment variable '{var_name}' is not set. "
                    f"Please set it or update the configuration."
                )
            return value

        return self.ENV_PATTERN.sub(replace, content)

    def validate_file(self, config_path: str | Path) -> list[str]:
        """
        Validate a configuration file and return any errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors: list[str] = []

        try:
            self.load(config_path)
        except (FileNotFoundError, ValueError) as e:
            errors.append(str(e))

        return errors

    @staticmethod
    def create_example_config(output_path: str | Path) -> None:
        """Create an example configuration file."""
        example = {
            "name": "table_modeler",
            "version": "1.0",
            "platform": {
                "url": "${PLATFORM_URL}",
                "database": "${PLATFORM_DB}",
                "username": "${PLATFORM_USER}",
                "password": "${PLATFORM_PASSWORD}",
            },
            "builder": {
                "discriminator_column": "sys_class_name",
                "reference_types": ["reference"],
                "integer_types": ["integer", "longint"],
            },
            "logging": {
                "level": "INFO",
                "output_dir": "./logs",
                "export_json": True,
                "export_csv": False,
            },
        }

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(example, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
