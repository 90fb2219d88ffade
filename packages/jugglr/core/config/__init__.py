"""Configuration models and loaders."""

from jugglr.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
    load_mhn_config,
)
from jugglr.core.config.models import AppConfig, ConfigBase, LoggingConfig, MhnConfig

__all__ = [
    "AppConfig",
    "ConfigBase",
    "LoggingConfig",
    "MhnConfig",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_mhn_config",
]
