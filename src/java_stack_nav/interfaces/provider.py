"""Abstract interface for symbol resolution providers."""

from typing import Protocol

from ..models.symbol import WorkspaceSymbol


class SymbolProvider(Protocol):
    """A collaborator that can find class symbols by name.

    Modelled after a language server answering ``workspace/symbol``
    requests. Only providers whose ``name`` is on the resolver's allow-list
    are queried.
    """

    @property
    def name(self) -> str:
        """Identity of the provider, e.g. "jdtls"."""
        ...

    async def workspace_symbols(self, query: str) -> list[WorkspaceSymbol]:
        """
        Search the workspace for symbols matching a query.

        Args:
            query: Class name to search for

        Returns:
            Matching symbols, possibly empty

        Raises:
            Exception: Any error reported by the provider
        """
        ...
