"""Utility functions and helpers.

This module provides various utilities for java-stack-nav:
- async_helpers: Error hierarchy, await-first-of-N fan-out
- safe_subprocess: Safe external command execution
- logging: Structured logging configuration
"""

from java_stack_nav.utils.async_helpers import (
    DeobfuscationError,
    ExportError,
    MissingLocationError,
    NavigatorError,
    NoProvidersError,
    NoStackTraceLoadedError,
    ResolutionError,
    StackTraceParseError,
    SymbolNotFoundError,
    first_acceptable,
)
from java_stack_nav.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)

__all__ = [
    # Errors
    "DeobfuscationError",
    "ExportError",
    "MissingLocationError",
    "NavigatorError",
    "NoProvidersError",
    "NoStackTraceLoadedError",
    "ResolutionError",
    "StackTraceParseError",
    "SymbolNotFoundError",
    # Async
    "first_acceptable",
    # Logging
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
]
