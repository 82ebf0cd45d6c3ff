"""Abstract interface for the editor hosting the commands."""

from typing import Protocol

from .text_source import TextSource


class Editor(Protocol):
    """The editing context a command runs in.

    Gives access to the current buffer, the cursor and named registers.
    """

    @property
    def cursor_line(self) -> int:
        """1-based line the cursor is on."""
        ...

    def set_cursor_line(self, line: int) -> None:
        """Move the cursor to a line of the current buffer."""
        ...

    def text(self) -> TextSource:
        """Lines of the current buffer."""
        ...

    def get_register(self, name: str) -> str:
        """Return the contents of a single-character named register."""
        ...

    def set_register(self, name: str, text: str) -> None:
        """Replace the contents of a named register."""
        ...

    def replace_lines(self, first_line: int, last_line: int, text: str) -> None:
        """
        Replace an inclusive range of buffer lines.

        Args:
            first_line: First line to replace (1-based)
            last_line: Last line to replace (1-based, inclusive)
            text: Replacement text, split on newlines
        """
        ...
