"""
Centralized configuration management for AnimePulse.

This module provides type-safe, validated configuration using Pydantic.
The ordered upstream source list lives here so sources can be swapped or
added through the environment or a JSON file without code changes.
"""

import json
from pathlib import Path
from string import Formatter
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationInfo, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    AGGREGATOR_USER_AGENT,
    DEFAULT_SOURCES,
    LOG_FILENAME,
    OPERATION_PLACEHOLDERS,
    OPERATIONS,
    REQUEST_TIMEOUT_MS,
    SOURCE_KIND_GENERIC,
    SOURCE_KINDS,
)
from ..logging import ConfigError


class SourceEndpoint(BaseModel):
    """
    One upstream source: a name, the payload dialect it speaks and a URL
    template per supported operation. A missing template means the source
    does not serve that operation.
    """

    name: str = Field(description="Human readable source name used in logs")
    kind: str = Field(default=SOURCE_KIND_GENERIC, description="Payload dialect: generic or jikan")
    search: Optional[str] = Field(default=None, description="Template with {query} and {page}")
    trending: Optional[str] = Field(default=None, description="Template with {page}")
    recent: Optional[str] = Field(default=None, description="Template with {page} and {kind}")
    info: Optional[str] = Field(default=None, description="Template with {id}")
    watch: Optional[str] = Field(default=None, description="Template with {id}")

    @field_validator('kind')
    @classmethod
    def validate_kind(cls, v: str) -> str:
        """Validate that the source kind has a normalizer"""
        if v.lower() not in SOURCE_KINDS:
            raise ValueError(f"Source kind must be one of {SOURCE_KINDS}")
        return v.lower()

    @field_validator('search', 'trending', 'recent', 'info', 'watch')
    @classmethod
    def validate_template(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        """Reject templates that use placeholders the operation cannot fill"""
        if v is None:
            return v
        allowed = OPERATION_PLACEHOLDERS[info.field_name]
        try:
            used = {name for _, name, _, _ in Formatter().parse(v) if name is not None}
        except ValueError as e:
            raise ValueError(f"Malformed URL template: {e}") from e
        unknown = used - allowed
        if unknown or "" in used:
            raise ValueError(f"Template for '{info.field_name}' may only use {sorted(allowed)}, got {sorted(used)}")
        return v

    def template_for(self, operation: str) -> Optional[str]:
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation '{operation}'")
        return getattr(self, operation)


def default_sources() -> List[SourceEndpoint]:
    return [SourceEndpoint(**entry) for entry in DEFAULT_SOURCES]


class AggregatorConfig(BaseSettings):
    """Configuration for the content aggregator"""

    model_config = SettingsConfigDict(
        env_prefix="AGGREGATOR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Ignore fields that don't belong to this config
    )

    timeout_ms: int = Field(default=REQUEST_TIMEOUT_MS, gt=0, description="Per-source request timeout in milliseconds")
    user_agent: str = Field(default=AGGREGATOR_USER_AGENT, description="User-Agent sent to every source")
    sources: List[SourceEndpoint] = Field(default_factory=default_sources, description="Ordered source list, highest priority first")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


class LoggingConfig(BaseSettings):
    """Configuration for logging behavior"""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Ignore fields that don't belong to this config
    )

    file_level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    log_file: str = Field(default=LOG_FILENAME, description="Log file path")

    @field_validator('file_level', 'console_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is one of the allowed values"""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class AnimePulseConfig(BaseSettings):
    """
    Main configuration class for AnimePulse.

    This class serves as the single source of truth for all configuration.
    It automatically loads from environment variables and .env files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"  # Ignore fields that don't belong to this config
    )

    aggregator: AggregatorConfig = Field(default_factory=AggregatorConfig, description="Aggregator configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    def save_to_file(self, path: Union[str, Path]) -> None:
        """
        Save configuration to a JSON file.

        Args:
            path: Path to save the configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode='json')

        with open(path, "w", encoding="utf-8") as f:
            json.dump(config_dict, f, indent=2, ensure_ascii=False)

    @classmethod
    def load_from_file(cls, path: Union[str, Path]) -> "AnimePulseConfig":
        """
        Load configuration from a JSON file.

        Args:
            path: Path to the configuration file

        Returns:
            AnimePulseConfig instance

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigError: If the file is not valid JSON or fails validation
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(**data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e


# Global configuration instance
_config_instance: Optional[AnimePulseConfig] = None


def setup_config(
    env_file: Optional[Union[str, Path]] = None,
    config_file: Optional[Union[str, Path]] = None,
    **kwargs
) -> AnimePulseConfig:
    """
    Set up the global configuration.

    Args:
        env_file: Path to .env file
        config_file: Path to a JSON file written by save_to_file
        **kwargs: Additional configuration overrides

    Returns:
        AnimePulseConfig instance
    """
    global _config_instance

    if config_file:
        _config_instance = AnimePulseConfig.load_from_file(config_file)
        return _config_instance

    config_kwargs = {}
    if env_file:
        config_kwargs["_env_file"] = str(env_file)

    config_kwargs.update(kwargs)

    _config_instance = AnimePulseConfig(**config_kwargs)
    return _config_instance


def get_config() -> AnimePulseConfig:
    """Get the global configuration instance, creating it on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = AnimePulseConfig()
    return _config_instance


def reload_config() -> AnimePulseConfig:
    """
    Reload configuration from environment and .env files.

    Returns:
        AnimePulseConfig instance
    """
    global _config_instance
    _config_instance = AnimePulseConfig()
    return _config_instance


def get_aggregator_config() -> AggregatorConfig:
    """Get aggregator configuration."""
    return get_config().aggregator


def get_logging_config() -> LoggingConfig:
    """Get logging configuration."""
    return get_config().logging


__all__ = [
    "SourceEndpoint",
    "default_sources",
    "AggregatorConfig",
    "LoggingConfig",
    "AnimePulseConfig",
    "setup_config",
    "get_config",
    "reload_config",
    "get_aggregator_config",
    "get_logging_config",
]
