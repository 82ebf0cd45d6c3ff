"""In-memory fakes for the editor facing protocols."""

from __future__ import annotations

from collections.abc import Sequence

from java_stack_nav.adapters.text.lines import ArrayTextSource
from java_stack_nav.models.items import DiagnosticItem, PickItem
from java_stack_nav.models.symbol import SymbolKind, SymbolLocation, WorkspaceSymbol


class FakeEditor:
    """In-memory Editor with a buffer, a cursor and registers."""

    def __init__(self, text: str = "", cursor_line: int = 1) -> None:
        self.lines = text.split("\n")
        self.cursor_line = cursor_line
        self.registers: dict[str, str] = {}

    def set_cursor_line(self, line: int) -> None:
        self.cursor_line = line

    def text(self) -> ArrayTextSource:
        return ArrayTextSource(self.lines)

    def get_register(self, name: str) -> str:
        return self.registers.get(name, "")

    def set_register(self, name: str, text: str) -> None:
        self.registers[name] = text

    def replace_lines(self, first_line: int, last_line: int, text: str) -> None:
        replacement = text.split("\n")
        if text.endswith("\n"):
            replacement.pop()
        self.lines[first_line - 1 : last_line] = replacement


class FakeProvider:
    """SymbolProvider answering from a fixed table of symbols."""

    def __init__(
        self,
        name: str = "jdtls",
        symbols: dict[str, list[WorkspaceSymbol]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self.symbols = symbols or {}
        self.error = error
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def workspace_symbols(self, query: str) -> list[WorkspaceSymbol]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.symbols.get(query, [])


class RecordingJump:
    """JumpSink remembering every jump."""

    def __init__(self) -> None:
        self.jumps: list[tuple[str, int]] = []

    def go_to(self, path: str, line_number: int) -> None:
        self.jumps.append((path, line_number))


class RecordingDiagnostics:
    """DiagnosticsSink remembering the last item list."""

    def __init__(self) -> None:
        self.items: list[DiagnosticItem] | None = None

    def set_items(self, items: Sequence[DiagnosticItem]) -> None:
        self.items = list(items)


class ScriptedPicker:
    """PickerSink choosing the item with a given frame index."""

    def __init__(self, choose_index: int | None = None) -> None:
        self.choose_index = choose_index
        self.offered: list[PickItem] = []
        self.selected: int | None = None

    async def pick(self, items: Sequence[PickItem], selected: int) -> PickItem | None:
        self.offered = list(items)
        self.selected = selected
        for item in items:
            if item.index == self.choose_index:
                return item
        return None


class ScriptedFilePrompt:
    """FilePrompt returning a fixed answer."""

    def __init__(self, answer: str | None = None) -> None:
        self.answer = answer
        self.prompts: list[tuple[str, str | None]] = []

    async def pick_file(self, prompt: str, directory: str | None) -> str | None:
        self.prompts.append((prompt, directory))
        return self.answer


class StaticTextFilter:
    """TextFilter returning canned output and remembering its input."""

    def __init__(self, output: str = "") -> None:
        self.output = output
        self.calls: list[tuple[str, str]] = []

    async def filter_text(self, text: str, mapping_file: str) -> str:
        self.calls.append((text, mapping_file))
        return self.output


def class_symbol(
    qualified_name: str,
    path: str | None = None,
    kind: SymbolKind = SymbolKind.CLASS,
) -> WorkspaceSymbol:
    """Build a workspace symbol the way jdtls reports a class."""
    container, _, name = qualified_name.rpartition(".")
    uri = f"file://{path}" if path else None
    return WorkspaceSymbol(
        name=name,
        kind=kind,
        location=SymbolLocation(uri=uri),
        container_name=container or None,
    )

