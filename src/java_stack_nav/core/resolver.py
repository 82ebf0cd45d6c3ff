"""Resolution of stack trace frames to source files.

This module implements the Resolver class that maps a frame's outer class
name to the file declaring it, by asking symbol providers (language servers)
for workspace symbols. Successful lookups are remembered for the rest of the
session in a ResolutionCache.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from java_stack_nav.core.frame_grammar import outer_class_name
from java_stack_nav.interfaces.provider import SymbolProvider
from java_stack_nav.models.frame import Frame
from java_stack_nav.models.symbol import WorkspaceSymbol
from java_stack_nav.utils.async_helpers import (
    MissingLocationError,
    NoProvidersError,
    SymbolNotFoundError,
    first_acceptable,
)

log = structlog.get_logger()

DEFAULT_ALLOWED_PROVIDERS = frozenset({"jdtls", "java_language_server"})

CacheKey = tuple[str, str | None]


class ResolutionCache:
    """Remembers which file declares a class.

    Keyed by ``(outer_class_name, expected_file_name)``. Entries are never
    invalidated: a class moved during a session keeps resolving to its old
    path.
    """

    def __init__(self) -> None:
        self._paths: dict[CacheKey, str] = {}
        self.hits = 0
        self.misses = 0

    def get(self, class_name: str, file_name: str | None) -> str | None:
        """Return the cached path for a class, if any."""
        path = self._paths.get((class_name, file_name))
        if path is None:
            self.misses += 1
            log.debug("cache_miss", class_name=class_name, file_name=file_name)
        else:
            self.hits += 1
            log.debug("cache_hit", class_name=class_name, file_name=file_name)
        return path

    def put(self, class_name: str, file_name: str | None, path: str) -> None:
        """Remember the path for a class."""
        self._paths[(class_name, file_name)] = path

    def clear(self) -> None:
        """Forget every entry."""
        self._paths.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, key: object) -> bool:
        return key in self._paths


# Global cache shared by every resolver that is not given its own
_resolution_cache: ResolutionCache | None = None


def get_resolution_cache() -> ResolutionCache:
    """Get or create the process-wide resolution cache."""
    global _resolution_cache
    if _resolution_cache is None:
        _resolution_cache = ResolutionCache()
    return _resolution_cache


class Resolver:
    """Resolves frames to source file paths.

    Responsibilities:
    - Reduce the frame's class to its outer class
    - Serve repeated lookups from the cache
    - Query every allowed provider concurrently on a miss
    - Pick the first class symbol whose qualified name matches

    Example:
        resolver = Resolver(lambda: language_servers)
        path = await resolver.resolve(frame)
    """

    def __init__(
        self,
        providers: Callable[[], Iterable[SymbolProvider]],
        allowed_providers: Iterable[str] = DEFAULT_ALLOWED_PROVIDERS,
        cache: ResolutionCache | None = None,
    ) -> None:
        """Initialize the Resolver.

        Args:
            providers: Returns the providers available right now
            allowed_providers: Provider names that may be queried
            cache: Cache to use, defaults to the process-wide one
        """
        self._providers = providers
        self._allowed = frozenset(allowed_providers)
        self._cache = cache if cache is not None else get_resolution_cache()

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    def available_providers(self) -> list[SymbolProvider]:
        """Providers that are both present and on the allow-list."""
        return [provider for provider in self._providers() if provider.name in self._allowed]

    async def resolve(self, frame: Frame) -> str:
        """Find the source file for a frame.

        Args:
            frame: Frame to resolve

        Returns:
            Path of the file declaring the frame's outer class

        Raises:
            NoProvidersError: If no allowed provider is available
            SymbolNotFoundError: If no provider knows the class
            MissingLocationError: If the class was found without a file location
        """
        return await self.resolve_class(outer_class_name(frame.class_name), frame.file_name)

    async def resolve_class(self, class_name: str, file_name: str | None = None) -> str:
        """Find the source file declaring a class.

        Args:
            class_name: Fully qualified outer class name
            file_name: File name the stack trace expects, part of the cache key

        Returns:
            Path of the declaring file

        Raises:
            NoProvidersError: If no allowed provider is available
            SymbolNotFoundError: If no provider knows the class
            MissingLocationError: If the class was found without a file location
        """
        cached = self._cache.get(class_name, file_name)
        if cached is not None:
            return cached

        providers = self.available_providers()
        if not providers:
            raise NoProvidersError(
                "No Java language servers available for resolving stack trace navigation"
            )

        log.debug(
            "resolving_class",
            class_name=class_name,
            file_name=file_name,
            providers=[provider.name for provider in providers],
        )

        failures: list[str] = []
        located_without_path = False

        def record_failure(error: BaseException) -> None:
            failures.append(str(error))

        async def query(provider: SymbolProvider) -> str | None:
            nonlocal located_without_path
            symbols = await provider.workspace_symbols(class_name)
            if not symbols:
                raise SymbolNotFoundError(f"No workspace symbols were found by {provider.name}")

            matches = [symbol for symbol in symbols if symbol.names_class(class_name)]
            if not matches:
                raise SymbolNotFoundError(
                    f"Workspace symbol matching class name {class_name} "
                    f"not found by {provider.name}"
                )

            path = _first_path(matches)
            if path is None:
                located_without_path = True
                raise MissingLocationError(
                    f"Workspace symbol for {class_name} did not have a file location"
                )
            return path

        path = await first_acceptable(
            (query(provider) for provider in providers),
            accept=lambda result: result is not None,
            on_error=record_failure,
        )

        if path is None:
            reason = "; ".join(failures) or "no result"
            message = f"Could not find file using workspace symbols for {class_name}: {reason}"
            log.debug("class_not_resolved", class_name=class_name, reason=reason)
            if located_without_path:
                raise MissingLocationError(message)
            raise SymbolNotFoundError(message)

        self._cache.put(class_name, file_name, path)
        log.debug("class_resolved", class_name=class_name, path=path)
        return path


def _first_path(symbols: Iterable[WorkspaceSymbol]) -> str | None:
    for symbol in symbols:
        path = symbol.location.path
        if path:
            return path
    return None
