"""
Configuration package for AnimePulse.

This package provides centralized, type-safe configuration management.
"""

from .manager import (
    SourceEndpoint,
    default_sources,
    AggregatorConfig,
    LoggingConfig,
    AnimePulseConfig,
    setup_config,
    get_config,
    reload_config,
    get_aggregator_config,
    get_logging_config,
)

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
