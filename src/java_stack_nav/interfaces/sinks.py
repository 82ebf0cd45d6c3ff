"""Abstract interfaces for the UI surfaces results are sent to."""

from collections.abc import Sequence
from typing import Protocol

from ..models.items import DiagnosticItem, PickItem


class JumpSink(Protocol):
    """Moves the user to a source location."""

    def go_to(self, path: str, line_number: int) -> None:
        """
        Open a file and place the cursor on a line.

        Args:
            path: File to open
            line_number: 1-based line to jump to
        """
        ...


class DiagnosticsSink(Protocol):
    """A diagnostics (quickfix) list."""

    def set_items(self, items: Sequence[DiagnosticItem]) -> None:
        """Replace the list contents with the given items, in order."""
        ...


class PickerSink(Protocol):
    """An interactive list the user can choose one entry from."""

    async def pick(self, items: Sequence[PickItem], selected: int) -> PickItem | None:
        """
        Show items and wait for the user's choice.

        Args:
            items: Entries to offer, in order
            selected: 1-based frame index to preselect

        Returns:
            The chosen item, or None if the user cancelled
        """
        ...


class FilePrompt(Protocol):
    """Asks the user to choose a file."""

    async def pick_file(self, prompt: str, directory: str | None) -> str | None:
        """
        Let the user choose a file.

        Args:
            prompt: Prompt text
            directory: Directory to browse, or None for the working directory

        Returns:
            The chosen file, or None if the user cancelled
        """
        ...
