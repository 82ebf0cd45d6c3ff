"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    FileLoggingConfig,
    LoggingConfig,
    NavigatorConfig,
    ResolverConfig,
    StackTraceConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "NavigatorConfig",
    # Section configs
    "StackTraceConfig",
    "ResolverConfig",
    "LoggingConfig",
    "FileLoggingConfig",
]
