"""Abstract interface for line-addressable text."""

from typing import Protocol


class TextSource(Protocol):
    """A sequence of lines with random access, numbered from 1.

    Satisfied by an editor buffer, an in-memory list of lines, or a string
    split on newlines.
    """

    @property
    def line_count(self) -> int:
        """Number of lines in the source."""
        ...

    def get_line(self, line: int) -> str:
        """
        Return the text of a line.

        Args:
            line: 1-based line number, ``1 <= line <= line_count``

        Returns:
            The line without its terminating newline
        """
        ...
