"""YAML configuration for the import CLI."""

from .loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    DatabaseConfig,
    ImportConfig,
    ParserConfig,
    WorkflowConfig,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "DatabaseConfig",
    "ImportConfig",
    "ParserConfig",
    "WorkflowConfig",
    "load_config",
]
