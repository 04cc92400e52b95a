"""Configuration loading and validation."""

from .loader import load_config
from .schema import DebugScreenConfig, FileLoggingConfig, LoggingConfig

__all__ = [
    # Loader
    "load_config",
    # Root config
    "DebugScreenConfig",
    # Nested configs
    "LoggingConfig",
    "FileLoggingConfig",
]
