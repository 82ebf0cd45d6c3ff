"""Async utility functions and the error hierarchy.

This module provides:
- Custom exceptions for the failures a command can report
- An await-first-of-N helper for fanning out queries
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

import structlog

log = structlog.get_logger()

T = TypeVar("T")


# =============================================================================
# Custom Exceptions
# =============================================================================


class NavigatorError(Exception):
    """Base exception for all stack trace navigation errors."""


class StackTraceParseError(NavigatorError):
    """No stack trace shaped text was found."""


class NoStackTraceLoadedError(NavigatorError):
    """Navigation was requested before a stack trace was loaded."""


class ResolutionError(NavigatorError):
    """A frame could not be resolved to a source file."""


class NoProvidersError(ResolutionError):
    """No symbol provider is available for resolution."""


class SymbolNotFoundError(ResolutionError):
    """No provider returned a matching class symbol."""


class MissingLocationError(ResolutionError):
    """A matching class symbol was found but had no usable location."""


class DeobfuscationError(NavigatorError):
    """The deobfuscation filter produced no usable output."""


class ExportError(NavigatorError):
    """A stack trace could not be exported to a sink."""


# =============================================================================
# Fan-out Utilities
# =============================================================================

# Losing tasks of a fan-out keep running; hold a reference until they finish.
_pending: set[asyncio.Task[object]] = set()


def _discard_outcome(task: asyncio.Task[object]) -> None:
    """Retrieve and drop the outcome of a task nobody awaits any more."""
    _pending.discard(task)
    if task.cancelled():
        return

    exception = task.exception()
    if exception is not None:
        log.debug(
            "ignored_late_failure",
            exception_type=type(exception).__name__,
            exception_message=str(exception),
        )


async def first_acceptable(
    awaitables: Iterable[Awaitable[T]],
    accept: Callable[[T], bool],
    on_error: Callable[[BaseException], None] | None = None,
) -> T | None:
    """Await several operations and return the first acceptable result.

    All operations are started at once. The first result for which
    ``accept`` returns True is returned; the remaining operations are not
    cancelled and their outcomes are ignored.

    Args:
        awaitables: Operations to run concurrently.
        accept: Predicate deciding whether a result is good enough.
        on_error: Called with the exception of each operation that fails
            before an acceptable result arrives.

    Returns:
        The first acceptable result, or None if every operation failed or
        returned an unacceptable result.

    Example:
        path = await first_acceptable(
            (provider.lookup(name) for provider in providers),
            accept=lambda result: result is not None,
        )
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    if not tasks:
        return None

    try:
        for next_done in asyncio.as_completed(tasks):
            try:
                result = await next_done
            except Exception as e:
                if on_error is not None:
                    on_error(e)
                continue

            if accept(result):
                return result
    finally:
        for task in tasks:
            _pending.add(task)  # type: ignore[arg-type]
            task.add_done_callback(_discard_outcome)  # type: ignore[arg-type]

    return None
