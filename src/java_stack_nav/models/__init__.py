"""Data models and transfer objects."""

from .frame import (
    NATIVE_METHOD,
    UNKNOWN_SOURCE,
    AssembledTrace,
    Frame,
    FrameSequence,
    frames_to_text,
)
from .items import DiagnosticItem, PickItem
from .symbol import SymbolKind, SymbolLocation, WorkspaceSymbol

__all__ = [
    # Frame models
    "Frame",
    "FrameSequence",
    "AssembledTrace",
    "frames_to_text",
    "UNKNOWN_SOURCE",
    "NATIVE_METHOD",
    # Symbol models
    "SymbolKind",
    "SymbolLocation",
    "WorkspaceSymbol",
    # Sink models
    "DiagnosticItem",
    "PickItem",
]
