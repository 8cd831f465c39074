"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Literal

import pendulum
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.exceptions import ConfigError


class FileSourceConfig(BaseModel):
    """Locations of the local rule and catalog exports."""
    rules_path: Path = Path("time_rules.yaml")
    catalog_path: Path = Path("products.json")


class HttpSourceConfig(BaseModel):
    """Document API connection settings."""
    base_url: str = ""
    timeout_seconds: float = 10.0
    api_key: str | None = None

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the request timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class CatalogConfig(BaseModel):
    """Presentation settings for product lists."""
    page_size: int = 10

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("page_size must be greater than zero")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Asia/Kolkata"
    source: Literal["file", "http"] = "file"
    files: FileSourceConfig = Field(default_factory=FileSourceConfig)
    http: HttpSourceConfig = Field(default_factory=HttpSourceConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def validate_http_source(self) -> "AppConfig":
        """Require a base URL when reading over HTTP."""
        if self.source == "http" and not self.http.base_url:
            raise ValueError("http.base_url is required when source is 'http'")
        return self

    def resolve_paths(self, base_dir: Path) -> "AppConfig":
        """
        Make relative file paths relative to ``base_dir``.

        Returns:
            A new AppConfig with absolute file paths
        """
        files = FileSourceConfig(
            rules_path=_resolve(self.files.rules_path, base_dir),
            catalog_path=_resolve(self.files.catalog_path, base_dir),
        )
        return self.model_copy(update={"files": files})

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance with file paths resolved against the
            config file's directory

        Raises:
            ConfigError: If the file is missing or the config is invalid
        """
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the root level.")

        try:
            config = cls(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc

        return config.resolve_paths(config_path.parent)


def _resolve(path: Path, base_dir: Path) -> Path:
    return path if path.is_absolute() else base_dir / path


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
