"""Data models for workspace symbols returned by resolution providers."""

from dataclasses import dataclass
from enum import IntEnum
from urllib.parse import unquote, urlparse


class SymbolKind(IntEnum):
    """Symbol kinds, numbered as in the Language Server Protocol."""

    FILE = 1
    MODULE = 2
    NAMESPACE = 3
    PACKAGE = 4
    CLASS = 5
    METHOD = 6
    PROPERTY = 7
    FIELD = 8
    CONSTRUCTOR = 9
    ENUM = 10
    INTERFACE = 11


@dataclass(frozen=True)
class SymbolLocation:
    """Where a symbol lives."""

    uri: str | None = None
    target_uri: str | None = None  # LocationLink form

    @property
    def path(self) -> str | None:
        """Local file system path for the location, if it has one."""
        uri = self.uri or self.target_uri
        if not uri:
            return None

        parsed = urlparse(uri)
        if parsed.scheme in ("", "file"):
            return unquote(parsed.path) or None

        # jdt:// and similar virtual documents have no file on disk
        return None


@dataclass(frozen=True)
class WorkspaceSymbol:
    """A symbol found by a workspace symbol query."""

    name: str
    kind: SymbolKind
    location: SymbolLocation
    container_name: str | None = None

    @property
    def qualified_name(self) -> str:
        """Container and name joined with a dot, or the name alone."""
        if self.container_name:
            return f"{self.container_name}.{self.name}"
        return self.name

    def names_class(self, class_name: str) -> bool:
        """Check if this symbol is the class with the given name."""
        if self.kind != SymbolKind.CLASS:
            return False
        return class_name in (self.name, self.qualified_name)
