"""Protocol definitions for pluggable collaborators."""

from .editor import Editor
from .filter import TextFilter
from .provider import SymbolProvider
from .sinks import DiagnosticsSink, FilePrompt, JumpSink, PickerSink
from .text_source import TextSource

__all__ = [
    "DiagnosticsSink",
    "Editor",
    "FilePrompt",
    "JumpSink",
    "PickerSink",
    "SymbolProvider",
    "TextFilter",
    "TextSource",
]
