"""In-memory text sources."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ArrayTextSource:
    """A TextSource backed by a list of lines.

    Example:
        source = ArrayTextSource.from_string(clipboard_text)
        first = source.get_line(1)
    """

    def __init__(self, lines: Sequence[str]) -> None:
        self._lines = list(lines)

    @classmethod
    def from_string(cls, text: str) -> ArrayTextSource:
        """Split text on newlines, accepting ``\\r\\n`` line endings.

        A trailing newline yields a final empty line, so the line count
        matches what an editor shows for the same text.
        """
        return cls(text.replace("\r\n", "\n").split("\n"))

    @classmethod
    def from_file(cls, path: Path | str) -> ArrayTextSource:
        """Read a text file, tolerating undecodable bytes."""
        with Path(path).open(encoding="utf-8", errors="replace", newline=None) as f:
            return cls.from_string(f.read())

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, line: int) -> str:
        if not 1 <= line <= len(self._lines):
            raise IndexError(f"Line {line} out of range 1..{len(self._lines)}")
        return self._lines[line - 1]

    def line_range(self, first_line: int, last_line: int) -> str:
        """Join an inclusive range of lines, each terminated by a newline."""
        return "".join(self.get_line(line) + "\n" for line in range(first_line, last_line + 1))
