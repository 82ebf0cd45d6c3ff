"""Abstract interface for external text filters."""

from typing import Protocol


class TextFilter(Protocol):
    """An external process that rewrites stack trace text.

    Used for deobfuscation: the obfuscated text goes in, the text with
    original names and line numbers comes out.
    """

    async def filter_text(self, text: str, mapping_file: str) -> str:
        """
        Run the filter over some text.

        Args:
            text: Text fed to the filter's standard input
            mapping_file: Mapping file passed to the filter as an argument

        Returns:
            The filter's output, empty if it produced nothing
        """
        ...
